"""
Daily project metrics job.

Once a day (server local time, midnight by default) every active project gets
its ``hoursWorked`` and ``peopleHelped`` rollups incremented. Failures are
logged and never stop later runs.
"""

import logging
import threading
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_HOURS_INCREMENT = 6
DEFAULT_PEOPLE_INCREMENT = 10


class JobState(Enum):
    IDLE = "idle"
    RUNNING = "running"


def next_run_after(now: datetime, hour: int = 0, minute: int = 0) -> datetime:
    """Return the first fire time strictly after ``now``."""
    candidate = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if candidate <= now:
        candidate += timedelta(days=1)
    return candidate


class ProjectMetricsJob:
    """Bulk increment of the metrics of active projects."""

    def __init__(self, projects, hours: int = DEFAULT_HOURS_INCREMENT,
                 people: int = DEFAULT_PEOPLE_INCREMENT):
        self.projects = projects
        self.hours = hours
        self.people = people
        self._lock = threading.Lock()
        self._state = JobState.IDLE
        self.last_run: Optional[datetime] = None
        self.last_error: Optional[str] = None

    @property
    def state(self) -> JobState:
        return self._state

    def run(self) -> Optional[int]:
        """Run one update; returns the number of projects changed, None on skip or failure."""
        if not self._lock.acquire(blocking=False):
            logger.warning("Project metrics update still running; skipping this run")
            return None
        self._state = JobState.RUNNING
        try:
            updated = self.projects.increment_active_metrics(self.hours, self.people)
            self.last_error = None
            logger.info(
                f"Daily project metrics updated (+{self.hours} hours, +{self.people} people) "
                f"on {updated} active project(s)"
            )
            return updated
        except Exception as e:
            self.last_error = str(e)
            logger.error(f"Project metrics update failed: {e}")
            return None
        finally:
            self.last_run = datetime.now()
            self._state = JobState.IDLE
            self._lock.release()


class ProjectMetricsScheduler:
    """Background thread firing a ``ProjectMetricsJob`` once per day."""

    def __init__(self, job: ProjectMetricsJob, hour: int = 0, minute: int = 0, clock=datetime.now):
        self.job = job
        self.hour = hour
        self.minute = minute
        self._clock = clock
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()
        self.next_run: Optional[datetime] = None

    @property
    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def seconds_until_next_run(self) -> float:
        now = self._clock()
        # Each fire time is strictly after the previous one
        after = now if self.next_run is None else max(now, self.next_run)
        self.next_run = next_run_after(after, self.hour, self.minute)
        return max(0.0, (self.next_run - now).total_seconds())

    def _loop(self):
        logger.info("Project metrics scheduler thread started")
        while not self._stop.is_set():
            delay = self.seconds_until_next_run()
            logger.debug(f"Next project metrics update at {self.next_run}")
            if self._stop.wait(delay):
                break
            self.job.run()
        logger.info("Project metrics scheduler thread exiting")

    def start(self):
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name='project-metrics-scheduler', daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0):
        if self._thread:
            self._stop.set()
            self._thread.join(timeout)
            self._thread = None
