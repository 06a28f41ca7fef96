"""
Domain models for the volunteer management application.

These models represent the core business entities independent of persistence concerns.
Stored documents use camelCase keys; the models expose snake_case attributes and
translate in ``to_document`` / ``from_document``.
"""

from dataclasses import dataclass, field, InitVar
from datetime import datetime, date, timezone
from typing import Optional, List, Dict, Any, Union
from enum import Enum

Number = Union[int, float]


def now_utc() -> datetime:
    """Timezone-aware UTC now for default timestamps (avoid datetime.utcnow deprecation)."""
    return datetime.now(timezone.utc)


def _parse_date(value) -> Optional[date]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


def _date_to_str(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def _rollup_value(value) -> Number:
    """Stored accumulator value as-is; absent or null counts as 0."""
    if value is None or value == '':
        return 0
    if isinstance(value, str):
        number = float(value)
        return int(number) if number.is_integer() else number
    return value


class TaskStatus(Enum):
    """Task status enumeration."""
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"

    @classmethod
    def choices(cls):
        return [(s.value, s.value) for s in cls]


class ProjectStatus(Enum):
    """Project lifecycle status."""
    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on-hold"

    @classmethod
    def choices(cls):
        return [(s.value, s.value.replace('-', ' ').title()) for s in cls]


# Statuses whose rollups count towards the impact report
REPORTABLE_PROJECT_STATUSES = (
    ProjectStatus.PLANNING.value,
    ProjectStatus.ACTIVE.value,
    ProjectStatus.COMPLETED.value,
)


@dataclass
class Volunteer:
    """Volunteer domain model."""
    id: Optional[str] = None
    name: str = ""
    email: str = ""
    phone: Optional[str] = None
    skills: List[str] = field(default_factory=list)
    availability: Optional[str] = None
    created_at: datetime = field(default_factory=now_utc)

    def to_document(self) -> Dict[str, Any]:
        """Convert to a document for storage (without the identifier)."""
        return {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "skills": list(self.skills),
            "availability": self.availability,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'Volunteer':
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            name=doc.get("name") or "",
            email=doc.get("email") or "",
            phone=doc.get("phone"),
            skills=list(doc.get("skills") or []),
            availability=doc.get("availability"),
            created_at=doc.get("createdAt") or now_utc(),
        )

    def to_dict(self) -> Dict[str, Any]:
        """JSON-friendly representation."""
        data = self.to_document()
        data["id"] = self.id
        data["createdAt"] = self.created_at.isoformat()
        return data


@dataclass
class Task:
    """Task domain model.

    ``assigned_to`` holds volunteer ids (weak references). ``assignees`` is only
    populated by an explicit expand at read time and is never stored.
    """
    id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    assigned_to: List[str] = field(default_factory=list)
    due_date: Optional[date] = None
    created_at: datetime = field(default_factory=now_utc)
    assignees: Optional[List[Volunteer]] = None

    @property
    def is_completed(self) -> bool:
        return self.status == TaskStatus.COMPLETED

    def to_document(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "assignedTo": list(self.assigned_to),
            "dueDate": _date_to_str(self.due_date),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'Task':
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            title=doc.get("title") or "",
            description=doc.get("description"),
            status=TaskStatus(doc.get("status") or TaskStatus.PENDING.value),
            assigned_to=[str(v) for v in (doc.get("assignedTo") or [])],
            due_date=_parse_date(doc.get("dueDate")),
            created_at=doc.get("createdAt") or now_utc(),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_document()
        data["id"] = self.id
        data["createdAt"] = self.created_at.isoformat()
        if self.assignees is not None:
            data["assignedTo"] = [v.to_dict() for v in self.assignees]
        return data


@dataclass
class Project:
    """Project domain model.

    ``hours_worked`` and ``people_helped`` are rollups maintained on the
    project itself and are treated as authoritative by the impact report.
    """
    id: Optional[str] = None
    name: str = ""
    description: Optional[str] = None
    location: Optional[str] = None
    status: ProjectStatus = ProjectStatus.PLANNING
    hours_worked: Number = 0
    people_helped: Number = 0
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    created_at: datetime = field(default_factory=now_utc)
    # Stored records are taken as they are; only new input is checked
    validate: InitVar[bool] = True

    def __post_init__(self, validate):
        if validate and (self.hours_worked < 0 or self.people_helped < 0):
            raise ValueError("Project metrics must be non-negative")

    def to_document(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "location": self.location,
            "status": self.status.value,
            "hoursWorked": self.hours_worked,
            "peopleHelped": self.people_helped,
            "startDate": _date_to_str(self.start_date),
            "endDate": _date_to_str(self.end_date),
            "createdAt": self.created_at,
        }

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> 'Project':
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            name=doc.get("name") or "",
            description=doc.get("description"),
            location=doc.get("location"),
            status=ProjectStatus(doc.get("status") or ProjectStatus.PLANNING.value),
            hours_worked=_rollup_value(doc.get("hoursWorked")),
            people_helped=_rollup_value(doc.get("peopleHelped")),
            start_date=_parse_date(doc.get("startDate")),
            end_date=_parse_date(doc.get("endDate")),
            created_at=doc.get("createdAt") or now_utc(),
            validate=False,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_document()
        data["id"] = self.id
        data["createdAt"] = self.created_at.isoformat()
        return data
