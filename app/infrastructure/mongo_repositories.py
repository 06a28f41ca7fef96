"""
MongoDB implementations of the domain repositories.

Each repository wraps one collection of the shared ``MongoStore`` handle.
Lookups by a malformed id behave like lookups of a missing record.
"""

import logging
from dataclasses import dataclass
from itertools import islice
from typing import Any, Dict, Iterator, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument

from app.domain.models import Volunteer, Task, Project, ProjectStatus
from app.domain.repositories import (
    VolunteerRepository, TaskRepository, ProjectRepository, Filter, Sort,
)
from .mongo_store import MongoStore, VOLUNTEERS, TASKS, PROJECTS

logger = logging.getLogger(__name__)

EXPAND_BATCH_SIZE = 100


def to_object_id(value) -> Optional[ObjectId]:
    """Parse an id string; None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


class _MongoCollectionRepository:
    """Shared CRUD plumbing; subclasses set ``entity`` and ``collection_name``."""

    entity: Any = None
    collection_name: str = ''
    default_sort: List = [('createdAt', -1)]

    def __init__(self, store: MongoStore):
        self._store = store

    @property
    def collection(self):
        return self._store.collection(self.collection_name)

    def _prepare(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Hook for converting outgoing field values before a write."""
        return document

    def create(self, entity):
        document = self._prepare(entity.to_document())
        result = self.collection.insert_one(document)
        entity.id = str(result.inserted_id)
        logger.debug(f"Created {self.collection_name} record {entity.id}")
        return entity

    def get_by_id(self, record_id: str):
        oid = to_object_id(record_id)
        if oid is None:
            return None
        doc = self.collection.find_one({'_id': oid})
        return self.entity.from_document(doc) if doc else None

    def find(self, filter: Filter = None, sort: Sort = None) -> Iterator:
        cursor = self.collection.find(filter or {})
        sort = sort if sort is not None else self.default_sort
        if sort:
            cursor = cursor.sort(sort)
        for doc in cursor:
            yield self.entity.from_document(doc)

    def count(self, filter: Filter = None) -> int:
        return self.collection.count_documents(filter or {})

    def update(self, record_id: str, fields: Dict[str, Any]):
        oid = to_object_id(record_id)
        if oid is None:
            return None
        doc = self.collection.find_one_and_update(
            {'_id': oid},
            {'$set': self._prepare(dict(fields))},
            return_document=ReturnDocument.AFTER,
        )
        return self.entity.from_document(doc) if doc else None

    def update_many(self, filter: Filter, deltas: Dict[str, int]) -> int:
        result = self.collection.update_many(filter or {}, {'$inc': dict(deltas)})
        return result.modified_count

    def delete(self, record_id: str) -> bool:
        oid = to_object_id(record_id)
        if oid is None:
            return False
        result = self.collection.delete_one({'_id': oid})
        return result.deleted_count > 0


class MongoVolunteerRepository(_MongoCollectionRepository, VolunteerRepository):
    entity = Volunteer
    collection_name = VOLUNTEERS
    default_sort = [('name', 1)]

    def get_many(self, volunteer_ids: List[str]) -> Dict[str, Volunteer]:
        oids = [oid for oid in (to_object_id(v) for v in volunteer_ids) if oid is not None]
        if not oids:
            return {}
        return {
            str(doc['_id']): Volunteer.from_document(doc)
            for doc in self.collection.find({'_id': {'$in': oids}})
        }


class MongoTaskRepository(_MongoCollectionRepository, TaskRepository):
    entity = Task
    collection_name = TASKS

    def __init__(self, store: MongoStore, volunteers: VolunteerRepository):
        super().__init__(store)
        self._volunteers = volunteers

    def _prepare(self, document):
        if 'assignedTo' in document:
            refs = [to_object_id(v) for v in document['assignedTo'] or []]
            document['assignedTo'] = [oid for oid in refs if oid is not None]
        return document

    def _expand(self, tasks: List[Task]) -> List[Task]:
        wanted = {vid for task in tasks for vid in task.assigned_to}
        resolved = self._volunteers.get_many(list(wanted)) if wanted else {}
        for task in tasks:
            # Dangling references (deleted volunteers) are dropped on read
            task.assignees = [resolved[vid] for vid in task.assigned_to if vid in resolved]
        return tasks

    def get_by_id(self, task_id: str, expand: bool = False) -> Optional[Task]:
        task = super().get_by_id(task_id)
        if task is not None and expand:
            self._expand([task])
        return task

    def find_with_assignees(self, filter: Filter = None, sort: Sort = None) -> Iterator[Task]:
        tasks = self.find(filter, sort)
        while True:
            batch = list(islice(tasks, EXPAND_BATCH_SIZE))
            if not batch:
                return
            yield from self._expand(batch)

    def find_assigned_to(self, volunteer_id: str) -> Iterator[Task]:
        oid = to_object_id(volunteer_id)
        if oid is None:
            return iter(())
        return self.find({'assignedTo': oid})


class MongoProjectRepository(_MongoCollectionRepository, ProjectRepository):
    entity = Project
    collection_name = PROJECTS

    def increment_active_metrics(self, hours: int, people: int) -> int:
        return self.update_many(
            {'status': ProjectStatus.ACTIVE.value},
            {'hoursWorked': hours, 'peopleHelped': people},
        )


@dataclass
class Repositories:
    """The three entity repositories sharing one store handle."""
    volunteers: VolunteerRepository
    tasks: TaskRepository
    projects: ProjectRepository

    @classmethod
    def from_store(cls, store: MongoStore) -> 'Repositories':
        volunteers = MongoVolunteerRepository(store)
        return cls(
            volunteers=volunteers,
            tasks=MongoTaskRepository(store, volunteers),
            projects=MongoProjectRepository(store),
        )
