"""Application exception types."""


class DatabaseConnectionError(ConnectionError):
    """The initial connection to the document store could not be established."""


class RecordNotFoundError(LookupError):
    """A repository lookup by id found nothing."""

    code = 404

    def __init__(self, entity: str, record_id: str):
        super().__init__(f"{entity} {record_id} not found")
        self.entity = entity
        self.record_id = record_id
