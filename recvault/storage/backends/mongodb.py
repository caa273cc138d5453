"""MongoDB record backend.

One document per record with fields ``name``, ``value`` and ``created``.
The connection is an explicit handle owned by whoever builds the backend:
it opens lazily on first use, stays open for the life of the process, and
is closed by an explicit call.
"""

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlsplit, urlunsplit

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, MongoClient, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from recvault.core.models import Backend, Record, RecordId, utcnow
from recvault.exceptions import BackendUnavailable
from recvault.storage.results import BackendResult

from .base import RecordBackend

logger = logging.getLogger(__name__)

DEFAULT_URI = "mongodb://localhost:27017/vaultdb"
DEFAULT_DATABASE = "vaultdb"
DEFAULT_COLLECTION = "records"

def redact_uri(uri: str) -> str:
    """Hide credentials in a connection string before logging it."""
    try:
        parts = urlsplit(uri)
    except ValueError:
        return "<invalid uri>"
    if "@" not in parts.netloc:
        return uri
    host = parts.netloc.rsplit("@", 1)[1]
    return urlunsplit(parts._replace(netloc=f"***@{host}"))


class MongoConnection:
    """Lifecycle handle for a MongoDB client.

    ``open()`` is bounded by ``connect_timeout_ms``: if no server answers a
    ping within that window the attempt fails with ``BackendUnavailable`` and
    the handle stays closed, so the next operation tries again. A re-entrant
    lock serializes opening, closing, and every operation run through
    ``session()``; nothing proceeds while the handle is being torn down.
    """

    def __init__(
        self,
        uri: str = DEFAULT_URI,
        database: str | None = None,
        collection: str = DEFAULT_COLLECTION,
        connect_timeout_ms: int = 5000,
        socket_timeout_ms: int = 45000,
        client_factory: Callable[..., MongoClient] = MongoClient,
    ):
        self.uri = uri
        self.database = database
        self.collection_name = collection
        self.connect_timeout_ms = connect_timeout_ms
        self.socket_timeout_ms = socket_timeout_ms
        self._client_factory = client_factory
        self._client: MongoClient | None = None
        self._collection: Collection | None = None
        self._lock = threading.RLock()

    @property
    def is_open(self) -> bool:
        return self._client is not None

    def open(self) -> None:
        """Connect and verify the server answers."""
        with self._lock:
            if self._client is not None:
                return

            logger.info(f"Connecting to MongoDB: {redact_uri(self.uri)}")
            client = None
            try:
                client = self._client_factory(
                    self.uri,
                    serverSelectionTimeoutMS=self.connect_timeout_ms,
                    connectTimeoutMS=self.connect_timeout_ms,
                    socketTimeoutMS=self.socket_timeout_ms,
                    tz_aware=True,
                )
                client.admin.command("ping")
                if self.database:
                    db = client[self.database]
                else:
                    db = client.get_default_database(default=DEFAULT_DATABASE)
            except PyMongoError as e:
                if client is not None:
                    client.close()
                logger.warning(f"MongoDB connection failed: {e}")
                raise BackendUnavailable(f"MongoDB connection failed: {e}") from e

            self._client = client
            self._collection = db[self.collection_name]
            logger.info("Connected to MongoDB")

    def close(self) -> None:
        """Close the client if open. Safe to call repeatedly."""
        with self._lock:
            if self._client is None:
                return
            try:
                self._client.close()
            finally:
                self._client = None
                self._collection = None
            logger.info("MongoDB connection closed")

    def collection(self) -> Collection:
        """Return the records collection, opening the connection if needed."""
        with self._lock:
            self.open()
            assert self._collection is not None
            return self._collection

    @contextmanager
    def session(self) -> Iterator[Collection]:
        """Hold the lifecycle lock for the duration of one operation."""
        with self._lock:
            yield self.collection()


class MongoBackend(RecordBackend):
    """Record backend over a MongoDB collection.

    Connectivity failures, server errors, and identifiers MongoDB cannot
    parse all surface as a single ``UNAVAILABLE`` result.
    """

    def __init__(self, connection: MongoConnection):
        self.connection = connection

    @property
    def kind(self) -> Backend:
        return Backend.PRIMARY

    def add(self, name: str, value: str) -> BackendResult:
        # BSON dates carry millisecond precision
        created = utcnow()
        created = created.replace(microsecond=created.microsecond // 1000 * 1000)

        def insert(collection: Collection) -> BackendResult:
            document = {"name": name, "value": value, "created": created}
            result = collection.insert_one(document)
            document["_id"] = result.inserted_id
            return BackendResult.ok(Backend.PRIMARY, record=self._to_record(document))

        return self._execute("add", insert)

    def list(self) -> BackendResult:
        def find_all(collection: Collection) -> BackendResult:
            cursor = collection.find().sort("created", DESCENDING)
            return BackendResult.ok(
                Backend.PRIMARY, records=[self._to_record(doc) for doc in cursor]
            )

        return self._execute("list", find_all)

    def update(self, record_id: RecordId, name: str, value: str) -> BackendResult:
        def replace_fields(collection: Collection) -> BackendResult:
            document = collection.find_one_and_update(
                {"_id": self._object_id(record_id)},
                {"$set": {"name": name, "value": value}},
                return_document=ReturnDocument.AFTER,
            )
            if document is None:
                return BackendResult.not_found(Backend.PRIMARY)
            return BackendResult.ok(Backend.PRIMARY, record=self._to_record(document))

        return self._execute("update", replace_fields)

    def delete(self, record_id: RecordId) -> BackendResult:
        def remove(collection: Collection) -> BackendResult:
            document = collection.find_one_and_delete(
                {"_id": self._object_id(record_id)}
            )
            if document is None:
                return BackendResult.not_found(Backend.PRIMARY)
            return BackendResult.ok(Backend.PRIMARY, record=self._to_record(document))

        return self._execute("delete", remove)

    def close(self) -> None:
        self.connection.close()

    def _execute(
        self, action: str, operation: Callable[[Collection], BackendResult]
    ) -> BackendResult:
        try:
            with self.connection.session() as collection:
                return operation(collection)
        except (BackendUnavailable, InvalidId, PyMongoError) as e:
            logger.warning(f"MongoDB {action} failed: {e}")
            return BackendResult.unavailable(Backend.PRIMARY, str(e))

    def _object_id(self, record_id: RecordId) -> ObjectId:
        if not self.owns(record_id):
            raise BackendUnavailable(f"Not a MongoDB identifier: {record_id}")
        return ObjectId(str(record_id.value))

    @staticmethod
    def _to_record(document: dict[str, Any]) -> Record:
        """Convert a stored document, rejecting ones the vault did not write."""
        object_id = document.get("_id")
        name = document.get("name")
        value = document.get("value")
        if object_id is None:
            raise BackendUnavailable("Malformed document without _id")
        if not isinstance(name, str) or not isinstance(value, str):
            raise BackendUnavailable(f"Malformed document {object_id}: missing fields")

        created = document.get("created")
        if created is None and isinstance(object_id, ObjectId):
            created = object_id.generation_time
        if created is None:
            created = utcnow()
        if not isinstance(created, datetime):
            raise BackendUnavailable(f"Malformed document {object_id}: bad created")
        if created.tzinfo is None:
            created = created.replace(tzinfo=timezone.utc)

        return Record(
            id=RecordId.primary(object_id),
            name=name,
            value=value,
            created_at=created,
            source=Backend.PRIMARY,
        )
