import threading
from datetime import datetime

import pytest

from workout_tracker.errors import AuthError, StoreError
from workout_tracker.models.workout import WorkoutRecord
from workout_tracker.services.sync import HistorySynchronizer, sort_workouts


def add_workout(store, context, date, *names):
    return store.insert(
        "workout",
        context.scope(),
        {
            "userId": context.user_id,
            "date": date,
            "exercisesPerformed": [
                {"exerciseName": name, "sets": 3, "reps": 5, "weight": 10, "notes": ""}
                for name in names
            ],
        },
    )


class Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, items, error):
        self.calls.append((items, error))


def test_sort_workouts_puts_missing_dates_last():
    workouts = [
        WorkoutRecord(id="a", date=datetime(2024, 1, 1, 12)),
        WorkoutRecord(id="b", date=None),
        WorkoutRecord(id="c", date=datetime(2024, 6, 1, 12)),
    ]

    assert [w.id for w in sort_workouts(workouts)] == ["c", "a", "b"]


def test_initial_snapshot_is_sorted(context, store):
    add_workout(store, context, "2024-01-01T12:00:00", "Squat")
    add_workout(store, context, None, "Bench")
    add_workout(store, context, "2024-06-01T12:00:00", "Row")
    recorder = Recorder()
    sync = HistorySynchronizer(context)

    sync.subscribe(recorder, start=False).run()

    assert len(recorder.calls) == 1
    workouts, error = recorder.calls[0]
    assert error is None
    assert [w.date for w in workouts] == [
        datetime(2024, 6, 1, 12),
        datetime(2024, 1, 1, 12),
        None,
    ]
    assert sync.workouts == workouts
    assert sync.is_loading is False


def test_snapshot_only_contains_own_scope(context, store):
    add_workout(store, context, "2024-01-01T12:00:00", "Squat")
    store.docs["other"] = {
        "_id": "other",
        "type": "workout",
        "appId": "test-app",
        "userId": "someone-else",
        "date": "2024-01-02T12:00:00",
        "exercisesPerformed": [],
    }
    recorder = Recorder()

    HistorySynchronizer(context).subscribe(recorder, start=False).run()

    assert [w.user_id for w in recorder.calls[0][0]] == [context.user_id]


def test_each_change_delivers_full_snapshot_and_statistics(context, store):
    add_workout(store, context, "2024-01-01T12:00:00", "Squat")
    store.script(
        lambda: add_workout(store, context, "2024-02-01T12:00:00", "Squat", "Bench"),
        lambda: store.delete(next(iter(store.docs))) and "deleted",
    )
    recorder = Recorder()
    sync = HistorySynchronizer(context)

    sync.subscribe(recorder, start=False).run()

    assert [len(items) for items, _ in recorder.calls] == [1, 2, 1]
    assert sync.statistics.total_workouts == 1
    assert sync.statistics.total_exercises_logged == 2
    assert sync.statistics.most_frequent_exercise == "Squat"


def test_dispose_stops_deliveries(context, store):
    store.script(
        lambda: add_workout(store, context, "2024-02-01T12:00:00", "Squat"),
        lambda: add_workout(store, context, "2024-03-01T12:00:00", "Squat"),
    )
    sync = HistorySynchronizer(context)
    calls = []

    def listener(items, error):
        calls.append(items)
        if len(calls) == 2:
            subscription.dispose()

    subscription = sync.subscribe(listener, start=False)
    subscription.run()

    assert len(calls) == 2
    assert subscription.active is False


def test_snapshot_fetched_before_dispose_is_not_delivered(context, store):
    sync = HistorySynchronizer(context)
    recorder = Recorder()
    subscription = sync.subscribe(recorder, start=False)
    original_fetch = store.fetch_all

    def fetch_then_dispose(doc_type, scope):
        docs = original_fetch(doc_type, scope)
        subscription.dispose()
        return docs

    store.fetch_all = fetch_then_dispose
    subscription.run()

    assert recorder.calls == []


def test_dispose_is_idempotent(context):
    subscription = HistorySynchronizer(context).subscribe(Recorder(), start=False)

    subscription.dispose()
    subscription.dispose()

    assert subscription.active is False


def test_store_error_is_delivered_once_and_stops(context, store):
    store.fail_reads = True
    recorder = Recorder()
    sync = HistorySynchronizer(context)

    subscription = sync.subscribe(recorder, start=False)
    subscription.run()

    assert len(recorder.calls) == 1
    items, error = recorder.calls[0]
    assert items is None
    assert isinstance(error, StoreError)
    assert sync.error is error
    assert subscription.active is False


def test_error_mid_stream_keeps_last_mirror(context, store):
    add_workout(store, context, "2024-01-01T12:00:00", "Squat")

    def fail():
        raise StoreError("Lost connection to the database.")

    store.script(fail)
    sync = HistorySynchronizer(context)
    recorder = Recorder()

    sync.subscribe(recorder, start=False).run()

    assert len(sync.workouts) == 1
    assert recorder.calls[-1][0] is None
    assert isinstance(recorder.calls[-1][1], StoreError)


def test_resubscribe_fetches_fresh_snapshot(context, store):
    add_workout(store, context, "2024-01-01T12:00:00", "Squat")
    sync = HistorySynchronizer(context)
    first = sync.subscribe(Recorder(), start=False)
    first.run()

    second = sync.subscribe(Recorder(), start=False)
    second.run()

    assert first.active is False
    assert store.fetch_count == 2


def test_subscribe_requires_user(signed_out_context):
    with pytest.raises(AuthError):
        HistorySynchronizer(signed_out_context).subscribe(Recorder(), start=False)


def test_background_subscription(context, store):
    add_workout(store, context, "2024-01-01T12:00:00", "Squat")
    delivered = threading.Event()

    def listener(items, error):
        delivered.set()

    sync = HistorySynchronizer(context)
    subscription = sync.subscribe(listener)

    assert delivered.wait(timeout=5)
    subscription._thread.join(timeout=5)
    sync.unsubscribe()
    assert subscription.active is False


def test_delete_workout(context, store):
    workout_id = add_workout(store, context, "2024-01-01T12:00:00", "Squat")

    assert HistorySynchronizer(context).delete_workout(workout_id) is True
    assert workout_id not in store.docs


def test_workout_with_odd_stored_values_stays_in_history(context, store):
    add_workout(store, context, "2024-01-01T12:00:00", "Squat")
    store.insert(
        "workout",
        context.scope(),
        {
            "userId": context.user_id,
            "date": "2024-01-02T12:00:00",
            "exercisesPerformed": [{"exerciseName": "Dip", "sets": 3, "weight": "bodyweight"}],
        },
    )
    sync = HistorySynchronizer(context)

    sync.subscribe(Recorder(), start=False).run()

    assert len(sync.workouts) == 2
    assert sync.statistics.total_exercises_logged == 2
    assert sync.statistics.total_volume_lifted == 30


def test_unexpected_error_is_delivered_as_store_error(context, store):
    add_workout(store, context, "2024-01-01T12:00:00", "Squat")

    def broken_feed():
        raise RuntimeError("undecodable change")

    store.script(broken_feed)
    recorder = Recorder()
    sync = HistorySynchronizer(context)

    subscription = sync.subscribe(recorder, start=False)
    subscription.run()

    items, error = recorder.calls[-1]
    assert items is None
    assert isinstance(error, StoreError)
    assert isinstance(error.__cause__, RuntimeError)
    assert sync.error is error
    assert sync.is_loading is False
    assert len(sync.workouts) == 1
    assert subscription.active is False


def test_listener_failure_stops_subscription(context, store):
    calls = []

    def listener(items, error):
        calls.append(error)
        if error is None:
            raise KeyError("listener bug")

    subscription = HistorySynchronizer(context).subscribe(listener, start=False)
    subscription.run()

    assert calls[0] is None
    assert isinstance(calls[1], StoreError)
    assert subscription.active is False
