import pytest

from workout_tracker.config.context import AppContext
from workout_tracker.errors import StoreError
from workout_tracker.services.auth import IdentityProvider


class FakeStore:
    """In-memory stand-in for Database.

    ``watch()`` replays the steps queued with ``script()``: each step mutates
    the store (or raises) and the resulting change is yielded.
    """

    def __init__(self):
        self.docs = {}
        self.seq = 0
        self.steps = []
        self.fail_writes = False
        self.fail_reads = False
        self.writes = []
        self.fetch_count = 0

    def _next_id(self):
        self.seq += 1
        return f"doc{self.seq}"

    def insert(self, doc_type, scope, body):
        if self.fail_writes:
            raise StoreError("Failed to save. Please try again.")
        doc_id = self._next_id()
        self.docs[doc_id] = dict(
            body,
            _id=doc_id,
            type=doc_type,
            appId=scope.app_id,
            userId=scope.user_id,
            createdAt="2024-01-01T00:00:00+00:00",
        )
        self.writes.append(("insert", doc_type, doc_id))
        return doc_id

    def put(self, doc_type, scope, doc_id, body, merge=True):
        if self.fail_writes:
            raise StoreError("Failed to save. Please try again.")
        doc = dict(self.docs.get(doc_id, {})) if merge else {}
        doc.update(body, _id=doc_id, type=doc_type, appId=scope.app_id, userId=scope.user_id)
        self.docs[doc_id] = doc
        self.seq += 1
        self.writes.append(("put", doc_type, doc_id))
        return doc_id

    def get(self, doc_id):
        if self.fail_reads:
            raise StoreError("Failed to load data. Please try again.")
        doc = self.docs.get(doc_id)
        return dict(doc) if doc is not None else None

    def delete(self, doc_id):
        if self.fail_writes:
            raise StoreError("Failed to delete. Please try again.")
        self.writes.append(("delete", None, doc_id))
        self.seq += 1
        return self.docs.pop(doc_id, None) is not None

    def fetch_all(self, doc_type, scope):
        if self.fail_reads:
            raise StoreError("Failed to load data. Please try again.")
        self.fetch_count += 1
        return [
            dict(doc)
            for doc in self.docs.values()
            if doc["type"] == doc_type
            and doc["appId"] == scope.app_id
            and doc["userId"] == scope.user_id
        ]

    def current_seq(self):
        return self.seq

    def script(self, *steps):
        self.steps.extend(steps)

    def watch(self, doc_type, scope, since="now"):
        while self.steps:
            step = self.steps.pop(0)
            yield {"id": step(), "seq": self.seq}


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def identity():
    provider = IdentityProvider()
    provider.sign_in()
    return provider


@pytest.fixture
def context(store, identity):
    return AppContext(store, identity, "test-app")


@pytest.fixture
def signed_out_context(store):
    return AppContext(store, IdentityProvider(), "test-app")
