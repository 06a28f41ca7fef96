"""
Repository interfaces for the domain layer.

These interfaces define the contracts for data access without coupling to specific implementations.
Filters are document-store query mappings (e.g. ``{'status': 'active'}``).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, List, Optional, Tuple

from .models import Volunteer, Task, Project

Filter = Optional[Dict[str, Any]]
Sort = Optional[List[Tuple[str, int]]]


class VolunteerRepository(ABC):
    """Repository interface for Volunteer operations."""

    @abstractmethod
    def create(self, volunteer: Volunteer) -> Volunteer:
        """Store a new volunteer and return it with its generated id."""
        pass

    @abstractmethod
    def get_by_id(self, volunteer_id: str) -> Optional[Volunteer]:
        """Get a volunteer by ID."""
        pass

    @abstractmethod
    def get_many(self, volunteer_ids: List[str]) -> Dict[str, Volunteer]:
        """Resolve a batch of ids; unknown ids are absent from the result."""
        pass

    @abstractmethod
    def find(self, filter: Filter = None, sort: Sort = None) -> Iterator[Volunteer]:
        """Lazily iterate volunteers matching the filter."""
        pass

    @abstractmethod
    def count(self, filter: Filter = None) -> int:
        pass

    @abstractmethod
    def update(self, volunteer_id: str, fields: Dict[str, Any]) -> Optional[Volunteer]:
        """Set the given document fields; None when the volunteer does not exist."""
        pass

    @abstractmethod
    def update_many(self, filter: Filter, deltas: Dict[str, int]) -> int:
        """Increment numeric fields on every match; returns the number modified."""
        pass

    @abstractmethod
    def delete(self, volunteer_id: str) -> bool:
        pass


class TaskRepository(ABC):
    """Repository interface for Task operations."""

    @abstractmethod
    def create(self, task: Task) -> Task:
        pass

    @abstractmethod
    def get_by_id(self, task_id: str, expand: bool = False) -> Optional[Task]:
        """Get a task by ID, optionally with assignees expanded."""
        pass

    @abstractmethod
    def find(self, filter: Filter = None, sort: Sort = None) -> Iterator[Task]:
        pass

    @abstractmethod
    def find_with_assignees(self, filter: Filter = None, sort: Sort = None) -> Iterator[Task]:
        """Like ``find`` but follows ``assignedTo`` into full Volunteer records."""
        pass

    @abstractmethod
    def find_assigned_to(self, volunteer_id: str) -> Iterator[Task]:
        """Tasks whose ``assignedTo`` references the given volunteer."""
        pass

    @abstractmethod
    def count(self, filter: Filter = None) -> int:
        pass

    @abstractmethod
    def update(self, task_id: str, fields: Dict[str, Any]) -> Optional[Task]:
        pass

    @abstractmethod
    def update_many(self, filter: Filter, deltas: Dict[str, int]) -> int:
        pass

    @abstractmethod
    def delete(self, task_id: str) -> bool:
        pass


class ProjectRepository(ABC):
    """Repository interface for Project operations."""

    @abstractmethod
    def create(self, project: Project) -> Project:
        pass

    @abstractmethod
    def get_by_id(self, project_id: str) -> Optional[Project]:
        pass

    @abstractmethod
    def find(self, filter: Filter = None, sort: Sort = None) -> Iterator[Project]:
        pass

    @abstractmethod
    def count(self, filter: Filter = None) -> int:
        pass

    @abstractmethod
    def update(self, project_id: str, fields: Dict[str, Any]) -> Optional[Project]:
        pass

    @abstractmethod
    def update_many(self, filter: Filter, deltas: Dict[str, int]) -> int:
        pass

    @abstractmethod
    def increment_active_metrics(self, hours: int, people: int) -> int:
        """Add to ``hoursWorked``/``peopleHelped`` of every active project."""
        pass

    @abstractmethod
    def delete(self, project_id: str) -> bool:
        pass
