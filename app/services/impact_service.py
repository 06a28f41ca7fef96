"""
Impact report aggregation.

Project-level rollups (``hoursWorked``, ``peopleHelped``) are authoritative, so
the report is a linear reduction over project records rather than a
recomputation from task or volunteer detail.
"""

import concurrent.futures
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from app.domain.models import Number, Task, TaskStatus, REPORTABLE_PROJECT_STATUSES

logger = logging.getLogger(__name__)


@dataclass
class ImpactReport:
    volunteers_count: int = 0
    total_people_helped: Number = 0
    total_hours: Number = 0
    tasks: List[Task] = field(default_factory=list)

    def to_context(self) -> Dict[str, Any]:
        """Template context using the report's public key names."""
        return {
            'volunteersCount': self.volunteers_count,
            'totalPeopleHelped': self.total_people_helped,
            'totalHours': self.total_hours,
            'tasks': self.tasks,
        }


class ImpactAggregator:
    """Builds the impact report from the three entity repositories."""

    def __init__(self, repositories):
        self.repositories = repositories

    def _count_volunteers(self) -> int:
        return self.repositories.volunteers.count()

    def _completed_tasks(self) -> List[Task]:
        return list(self.repositories.tasks.find_with_assignees(
            {'status': TaskStatus.COMPLETED.value}
        ))

    def _reportable_projects(self):
        return list(self.repositories.projects.find(
            {'status': {'$in': list(REPORTABLE_PROJECT_STATUSES)}}
        ))

    def build_impact_report(self) -> ImpactReport:
        """Run the three queries concurrently and reduce the project rollups.

        Any failing query fails the whole report; its exception propagates.
        """
        with concurrent.futures.ThreadPoolExecutor(max_workers=3) as pool:
            volunteers_future = pool.submit(self._count_volunteers)
            tasks_future = pool.submit(self._completed_tasks)
            projects_future = pool.submit(self._reportable_projects)

            volunteers_count = volunteers_future.result()
            tasks = tasks_future.result()
            projects = projects_future.result()

        report = ImpactReport(
            volunteers_count=volunteers_count,
            total_people_helped=sum(p.people_helped or 0 for p in projects),
            total_hours=sum(p.hours_worked or 0 for p in projects),
            tasks=tasks,
        )
        logger.debug(
            f"Impact report: {report.volunteers_count} volunteers, "
            f"{len(tasks)} completed tasks, {len(projects)} projects"
        )
        return report
