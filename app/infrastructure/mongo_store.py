"""
MongoDB connection handle.

The store is constructed once by the application factory and passed to the
repositories and the metrics scheduler. Connection lifecycle events reported by
the driver are written to the process log; recovery is left to the driver.
"""

import logging
import sys
from typing import Optional
from urllib.parse import urlparse

from pymongo import MongoClient, monitoring
from pymongo.errors import PyMongoError

from app.errors import DatabaseConnectionError

logger = logging.getLogger(__name__)

VOLUNTEERS = 'volunteers'
TASKS = 'tasks'
PROJECTS = 'projects'


def _redact_uri(uri: str) -> str:
    """Strip credentials from a connection URI before logging it."""
    try:
        parsed = urlparse(uri)
    except ValueError:
        return '<invalid uri>'
    if parsed.password or parsed.username:
        netloc = parsed.hostname or ''
        if parsed.port:
            netloc = f"{netloc}:{parsed.port}"
        parsed = parsed._replace(netloc=f"***@{netloc}")
    return parsed.geturl()


class ConnectionEventLogger(monitoring.ServerHeartbeatListener, monitoring.ServerListener):
    """Logs ``error`` and ``disconnected`` events for the lifetime of the client."""

    def __init__(self):
        self.disconnected = False

    # Heartbeats
    def started(self, event):
        pass

    def succeeded(self, event):
        pass

    def failed(self, event):
        logger.error(f"MongoDB connection error: {event.connection_id}: {event.reply}")

    # Server topology
    def opened(self, event):
        logger.debug(f"MongoDB server {event.server_address} opened")

    def description_changed(self, event):
        previous = event.previous_description.server_type_name
        new = event.new_description.server_type_name
        if new == 'Unknown' and previous != 'Unknown':
            self.disconnected = True
            logger.warning(f"MongoDB disconnected ({event.server_address})")
        elif previous == 'Unknown' and new != 'Unknown' and self.disconnected:
            self.disconnected = False
            logger.info(f"MongoDB reconnected ({event.server_address})")

    def closed(self, event):
        logger.debug(f"MongoDB server {event.server_address} closed")


class MongoStore:
    """Owned connection handle for the application's document database."""

    def __init__(self, uri: str, db_name: str, connect_timeout_ms: int = 5000,
                 client: Optional[MongoClient] = None):
        self.uri = uri
        self.db_name = db_name
        self.connect_timeout_ms = connect_timeout_ms
        self.listener = ConnectionEventLogger()
        self._client = client
        self._db = None

    @classmethod
    def from_config(cls, config, client=None) -> 'MongoStore':
        return cls(
            config['MONGO_URI'],
            config['MONGO_DB_NAME'],
            connect_timeout_ms=config.get('MONGO_CONNECT_TIMEOUT_MS', 5000),
            client=client,
        )

    @property
    def is_connected(self) -> bool:
        return self._db is not None

    def connect(self) -> 'MongoStore':
        """Establish the connection and verify it with a ping.

        Raises:
            DatabaseConnectionError: if the server cannot be reached.
        """
        try:
            if self._client is None:
                self._client = MongoClient(
                    self.uri,
                    serverSelectionTimeoutMS=self.connect_timeout_ms,
                    connectTimeoutMS=self.connect_timeout_ms,
                    event_listeners=[self.listener],
                )
            self._client.admin.command('ping')
        except PyMongoError as e:
            raise DatabaseConnectionError(
                f"Could not connect to MongoDB at {_redact_uri(self.uri)}: {e}"
            ) from e

        self._db = self._client[self.db_name]
        logger.info(f"Connected to MongoDB database '{self.db_name}' at {_redact_uri(self.uri)}")
        return self

    def collection(self, name: str):
        if self._db is None:
            raise RuntimeError("MongoStore.connect() must be called before use")
        return self._db[name]

    def close(self):
        if self._client is not None:
            self._client.close()
            logger.info("MongoDB connection closed")
        self._db = None


def connect_or_exit(store: MongoStore) -> MongoStore:
    """Connect the store, terminating the process if the first attempt fails."""
    try:
        return store.connect()
    except DatabaseConnectionError as e:
        logger.critical(f"Failed to connect to MongoDB: {e}")
        sys.exit(1)
