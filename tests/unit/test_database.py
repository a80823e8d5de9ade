from unittest.mock import MagicMock, patch

import couchdb
import pytest

from workout_tracker.config.context import Scope
from workout_tracker.config.database import Database
from workout_tracker.errors import StoreError

SCOPE = Scope("test-app", "user-1")


@pytest.fixture
def couch_db():
    db = MagicMock()
    db.__contains__.return_value = True
    db.save.return_value = ("doc-id", "1-abc")
    return db


@pytest.fixture
def database(couch_db):
    with patch("workout_tracker.config.database.couchdb.Server") as mock_server:
        server = mock_server.return_value
        server.__contains__.return_value = True
        server.__getitem__.return_value = couch_db
        yield Database(url="http://couch:5984", user="u", password="p", db_name="tests")


def test_connect_creates_missing_database_and_design_documents():
    couch_db = MagicMock()
    couch_db.__contains__.return_value = False
    with patch("workout_tracker.config.database.couchdb.Server") as mock_server:
        server = mock_server.return_value
        server.__contains__.return_value = False
        server.create.return_value = couch_db

        Database(url="http://couch:5984", user="u", password="p", db_name="tests")

    server.create.assert_called_once_with("tests")
    assert server.resource.credentials == ("u", "p")
    saved_ids = [call.args[0]["_id"] for call in couch_db.save.call_args_list]
    assert saved_ids == ["_design/exercises", "_design/workouts", "_design/scoped"]
    workout_views = couch_db.save.call_args_list[1].args[0]["views"]
    assert list(workout_views) == ["by_scope"]


def test_connect_failure_raises_store_error():
    with patch("workout_tracker.config.database.couchdb.Server") as mock_server:
        mock_server.return_value.__contains__.side_effect = ConnectionRefusedError()

        with pytest.raises(StoreError):
            Database(url="http://couch:5984", user="u", password="p", db_name="tests")


def test_insert_stamps_scope_and_created_at(database, couch_db):
    doc_id = database.insert("exercise", SCOPE, {"name": "Squat"})

    saved = couch_db.save.call_args.args[0]
    assert doc_id == "doc-id"
    assert saved["name"] == "Squat"
    assert saved["type"] == "exercise"
    assert saved["appId"] == "test-app"
    assert saved["userId"] == "user-1"
    assert len(saved["_id"]) == 32
    assert "createdAt" in saved


def test_insert_failure_raises_store_error(database, couch_db):
    couch_db.save.side_effect = couchdb.http.ServerError("boom")

    with pytest.raises(StoreError):
        database.insert("workout", SCOPE, {"exercisesPerformed": []})


def test_put_merges_existing_document(database, couch_db):
    couch_db.get.return_value = {"_id": "p", "_rev": "1-a", "theme": "dark"}

    database.put("profile", SCOPE, "p", {"username": "lifter"})

    saved = couch_db.save.call_args.args[0]
    assert saved["_rev"] == "1-a"
    assert saved["theme"] == "dark"
    assert saved["username"] == "lifter"


def test_get_missing_document_returns_none(database, couch_db):
    couch_db.get.return_value = None

    assert database.get("missing") is None


def test_delete_keeps_scope_fields(database, couch_db):
    couch_db.get.return_value = {
        "_id": "w1",
        "_rev": "2-b",
        "type": "workout",
        "appId": "test-app",
        "userId": "user-1",
        "exercisesPerformed": [],
    }

    assert database.delete("w1") is True

    couch_db.save.assert_called_with(
        {
            "_id": "w1",
            "_rev": "2-b",
            "_deleted": True,
            "type": "workout",
            "appId": "test-app",
            "userId": "user-1",
        }
    )


def test_delete_missing_document(database, couch_db):
    couch_db.get.return_value = None

    assert database.delete("nope") is False


def test_fetch_all_queries_scope_view(database, couch_db):
    couch_db.view.return_value = [
        MagicMock(doc={"_id": "w1", "type": "workout"}),
        MagicMock(doc=None),
    ]

    docs = database.fetch_all("workout", SCOPE)

    couch_db.view.assert_called_once_with(
        "workouts/by_scope", key=["test-app", "user-1"], include_docs=True
    )
    assert docs == [{"_id": "w1", "type": "workout"}]


def test_fetch_all_failure_raises_store_error(database, couch_db):
    couch_db.view.side_effect = couchdb.http.Unauthorized("no")

    with pytest.raises(StoreError):
        database.fetch_all("exercise", SCOPE)


def test_watch_uses_scoped_continuous_feed(database, couch_db):
    couch_db.changes.return_value = iter([{"id": "w1", "seq": 5}])

    changes = list(database.watch("workout", SCOPE, since=4))

    assert changes == [{"id": "w1", "seq": 5}]
    kwargs = couch_db.changes.call_args.kwargs
    assert kwargs["feed"] == "continuous"
    assert kwargs["since"] == 4
    assert kwargs["filter"] == "scoped/by_scope"
    assert kwargs["doc_type"] == "workout"
    assert kwargs["user_id"] == "user-1"


def test_watch_connection_loss_raises_store_error(database, couch_db):
    def feed():
        yield {"id": "w1"}
        raise ConnectionResetError()

    couch_db.changes.return_value = feed()

    watcher = database.watch("workout", SCOPE)
    assert next(watcher) == {"id": "w1"}
    with pytest.raises(StoreError):
        next(watcher)
