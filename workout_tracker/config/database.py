import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional

import couchdb

from workout_tracker.config.config import (
    CHANGES_HEARTBEAT_MS,
    COUCHDB_DB,
    COUCHDB_PASSWORD,
    COUCHDB_URL,
    COUCHDB_USER,
)
from workout_tracker.errors import StoreError

from .views import create_exercise_views, create_sync_filters, create_workout_views

# Configure logging
logger = logging.getLogger(__name__)

# Everything the couchdb client raises for a failed request
STORE_EXCEPTIONS = (
    couchdb.http.HTTPError,
    couchdb.http.ServerError,
    couchdb.http.RedirectLimit,
    OSError,
)

DESIGN_DOCUMENTS = {
    "_design/exercises": create_exercise_views,
    "_design/workouts": create_workout_views,
    "_design/scoped": create_sync_filters,
}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Database:
    """CouchDB-backed store for exercises, workouts and profiles.

    Every document carries ``type``, ``appId`` and ``userId`` so that one
    database holds all users' collections; reads and change feeds are always
    restricted to a single ``(appId, userId)`` scope.
    """

    def __init__(
        self,
        url: str = COUCHDB_URL,
        user: Optional[str] = COUCHDB_USER,
        password: Optional[str] = COUCHDB_PASSWORD,
        db_name: str = COUCHDB_DB,
        heartbeat_ms: int = CHANGES_HEARTBEAT_MS,
    ):
        """Initialize the database connection."""
        self.couchdb_url = url
        self.couchdb_db = db_name
        self.heartbeat_ms = heartbeat_ms
        try:
            self.server = couchdb.Server(url)
            if user and password:
                self.server.resource.credentials = (user, password)
                logger.info(f"Connecting to CouchDB at {url} using user: {user}")
            else:
                logger.info(f"Connecting to CouchDB at {url} without credentials")

            if db_name in self.server:
                self.db = self.server[db_name]
                logger.info(f"Connected to existing database: {db_name}")
            else:
                logger.info(f"Database {db_name} does not exist. Creating...")
                self.db = self.server.create(db_name)
                logger.info(f"Created database: {db_name}")

            self._ensure_design_documents()
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error connecting to CouchDB: {e}")
            raise StoreError("Could not connect to the database.") from e

    def _ensure_design_documents(self):
        """Create any missing design documents."""
        for doc_id, create in DESIGN_DOCUMENTS.items():
            if doc_id not in self.db:
                logger.info(f"Creating design document {doc_id}")
                create(self.db)

    def _ensure_json_serializable(self, obj: Any) -> Any:
        """Ensure an object is JSON serializable."""
        if isinstance(obj, dict):
            return {k: self._ensure_json_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [self._ensure_json_serializable(item) for item in obj]
        elif isinstance(obj, datetime):
            return obj.isoformat()
        elif hasattr(obj, "model_dump"):
            return self._ensure_json_serializable(obj.model_dump(by_alias=True))
        else:
            return obj

    @staticmethod
    def _scope_fields(doc_type: str, scope) -> Dict[str, str]:
        return {"type": doc_type, "appId": scope.app_id, "userId": scope.user_id}

    def insert(self, doc_type: str, scope, body: Dict[str, Any]) -> str:
        """Insert a new document and return its store-assigned id."""
        doc = self._ensure_json_serializable(body)
        doc.update(self._scope_fields(doc_type, scope))
        doc["_id"] = uuid.uuid4().hex
        doc["createdAt"] = utc_now_iso()
        try:
            doc_id, doc_rev = self.db.save(doc)
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error inserting {doc_type} document: {e}")
            raise StoreError(f"Failed to save {doc_type}. Please try again.") from e
        logger.info(f"Inserted {doc_type} document. ID: {doc_id}, Rev: {doc_rev}")
        return doc_id

    def put(
        self,
        doc_type: str,
        scope,
        doc_id: str,
        body: Dict[str, Any],
        merge: bool = True,
    ) -> str:
        """Write a document under a known id, merging into any existing body."""
        try:
            existing = self.db.get(doc_id)
            if existing is not None and merge:
                doc = dict(existing)
            else:
                doc = {"_id": doc_id}
                if existing is not None:
                    doc["_rev"] = existing["_rev"]
            doc.update(self._ensure_json_serializable(body))
            doc.update(self._scope_fields(doc_type, scope))
            doc.setdefault("createdAt", utc_now_iso())
            doc_id, doc_rev = self.db.save(doc)
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error writing {doc_type} document {doc_id}: {e}")
            raise StoreError(f"Failed to save {doc_type}. Please try again.") from e
        logger.info(f"Wrote {doc_type} document. ID: {doc_id}, Rev: {doc_rev}")
        return doc_id

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        """Retrieve a document by ID, or None when it does not exist."""
        try:
            doc = self.db.get(doc_id)
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error retrieving document {doc_id}: {e}")
            raise StoreError("Failed to load data. Please try again.") from e
        if doc is None:
            logger.warning(f"Document not found: {doc_id}")
            return None
        return dict(doc)

    def delete(self, doc_id: str) -> bool:
        """Delete a document by ID.

        The deletion revision keeps the scope fields so filtered change feeds
        still report it. Returns False when the document did not exist.
        """
        try:
            doc = self.db.get(doc_id)
            if doc is None:
                logger.warning(f"Cannot delete missing document: {doc_id}")
                return False
            tombstone = {
                "_id": doc["_id"],
                "_rev": doc["_rev"],
                "_deleted": True,
                "type": doc.get("type"),
                "appId": doc.get("appId"),
                "userId": doc.get("userId"),
            }
            self.db.save(tombstone)
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error deleting document {doc_id}: {e}")
            raise StoreError("Failed to delete. Please try again.") from e
        logger.info(f"Deleted document: {doc_id}")
        return True

    def fetch_all(self, doc_type: str, scope) -> List[Dict[str, Any]]:
        """Fetch every document of a type in a scope."""
        view_name = f"{doc_type}s/by_scope"
        try:
            rows = self.db.view(
                view_name, key=[scope.app_id, scope.user_id], include_docs=True
            )
            docs = [dict(row.doc) for row in rows if row.doc is not None]
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error fetching {doc_type} documents: {e}")
            raise StoreError(f"Failed to load {doc_type}s. Please try again.") from e
        logger.info(f"Fetched {len(docs)} {doc_type} documents for {scope.user_id}")
        return docs

    def current_seq(self):
        """Return the database update sequence."""
        try:
            return self.db.info()["update_seq"]
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error reading update sequence: {e}")
            raise StoreError("Failed to load data. Please try again.") from e

    def watch(self, doc_type: str, scope, since="now") -> Iterator[Dict[str, Any]]:
        """Yield change notifications for a type in a scope, indefinitely."""
        try:
            feed = self.db.changes(
                feed="continuous",
                since=since,
                heartbeat=self.heartbeat_ms,
                filter="scoped/by_scope",
                doc_type=doc_type,
                app_id=scope.app_id,
                user_id=scope.user_id,
            )
            for change in feed:
                yield change
        except STORE_EXCEPTIONS as e:
            logger.error(f"Error watching {doc_type} changes: {e}")
            raise StoreError("Lost connection to the database.") from e
