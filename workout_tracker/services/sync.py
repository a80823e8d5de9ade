import logging
import threading
from typing import Callable, Generic, List, Optional, TypeVar

from workout_tracker.config.context import AppContext, Scope
from workout_tracker.errors import StoreError
from workout_tracker.models.statistics import WorkoutStatistics
from workout_tracker.models.workout import WorkoutRecord
from workout_tracker.services.statistics import compute_statistics

logger = logging.getLogger(__name__)

T = TypeVar("T")

SnapshotListener = Callable[[Optional[List[T]], Optional[StoreError]], None]


def sort_workouts(workouts: List[WorkoutRecord]) -> List[WorkoutRecord]:
    """Most recent first; workouts without a date count as timestamp 0."""
    return sorted(
        workouts,
        key=lambda workout: workout.date.timestamp() if workout.date else 0.0,
        reverse=True,
    )


class Subscription(Generic[T]):
    """A live query over one document type in one scope.

    Every change notification triggers a fresh fetch of the whole result set,
    which is delivered to the listener as a complete snapshot. On a store
    error the listener receives ``(None, error)`` once and the subscription
    stops; callers re-subscribe to retry.

    ``dispose()`` is idempotent. Deliveries happen under a lock and check the
    liveness flag first, so once ``dispose()`` has returned the listener is
    never called again, even for a snapshot fetched before disposal.
    """

    def __init__(
        self,
        store,
        doc_type: str,
        scope: Scope,
        parse: Callable[[dict], T],
        order: Callable[[List[T]], List[T]],
        listener: SnapshotListener,
        name: Optional[str] = None,
    ):
        self.store = store
        self.doc_type = doc_type
        self.scope = scope
        self.parse = parse
        self.order = order
        self.listener = listener
        self.name = name or f"{doc_type} subscription"
        self._active = True
        self._lock = threading.RLock()
        self._thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        return self._active

    def fetch_snapshot(self) -> List[T]:
        items = []
        for doc in self.store.fetch_all(self.doc_type, self.scope):
            try:
                items.append(self.parse(doc))
            except (TypeError, ValueError) as e:
                logger.warning(f"{self.name}: skipping malformed document {doc.get('_id')}: {e}")
        return self.order(items)

    def run(self):
        """Deliver the initial snapshot, then one snapshot per change, until disposed."""
        try:
            since = self.store.current_seq()
            if not self._deliver(self.fetch_snapshot(), None):
                return
            for change in self.store.watch(self.doc_type, self.scope, since=since):
                if not self._active:
                    break
                logger.debug(f"{self.name}: change {change.get('id')} received")
                if not self._deliver(self.fetch_snapshot(), None):
                    break
        except StoreError as e:
            logger.error(f"{self.name} failed: {e}")
            self._fail(e)
        except Exception as e:
            logger.error(f"{self.name} failed unexpectedly: {e}", exc_info=True)
            error = StoreError("Failed to load data. Please try again.")
            error.__cause__ = e
            self._fail(error)
        logger.info(f"{self.name} stopped")

    def _fail(self, error: StoreError):
        try:
            self._deliver(None, error)
        finally:
            self.dispose()

    def start(self) -> "Subscription[T]":
        """Run the subscription on a background thread."""
        self._thread = threading.Thread(target=self.run, name=self.name, daemon=True)
        self._thread.start()
        return self

    def dispose(self):
        with self._lock:
            if not self._active:
                return
            self._active = False
        logger.info(f"{self.name} disposed")

    def _deliver(self, items: Optional[List[T]], error: Optional[StoreError]) -> bool:
        with self._lock:
            if not self._active:
                return False
            if error is None:
                logger.info(f"{self.name}: delivering {len(items)} items")
            self.listener(items, error)
            return True


class HistorySynchronizer:
    """Keeps a local, date-ordered mirror of the user's workouts.

    The mirror is replaced wholesale on every snapshot and the statistics are
    recomputed from it each time.
    """

    def __init__(self, context: AppContext):
        self.context = context
        self.workouts: List[WorkoutRecord] = []
        self.statistics: WorkoutStatistics = compute_statistics([])
        self.is_loading = False
        self.error: Optional[StoreError] = None
        self._listener: Optional[SnapshotListener] = None
        self._subscription: Optional[Subscription[WorkoutRecord]] = None

    def subscribe(
        self, listener: Optional[SnapshotListener] = None, start: bool = True
    ) -> Subscription[WorkoutRecord]:
        """Start mirroring the signed-in user's workouts.

        Any earlier subscription of this synchronizer is disposed first. With
        ``start=False`` the caller drives it with ``Subscription.run()``.
        """
        scope = self.context.scope()
        self.unsubscribe()
        self.is_loading = True
        self.error = None
        self._listener = listener
        self._subscription = Subscription(
            self.context.store,
            "workout",
            scope,
            parse=WorkoutRecord.from_document,
            order=sort_workouts,
            listener=self._apply_snapshot,
            name="workout history",
        )
        if start:
            self._subscription.start()
        return self._subscription

    def unsubscribe(self):
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None

    def delete_workout(self, workout_id: str) -> bool:
        self.context.scope()
        return self.context.store.delete(workout_id)

    def _apply_snapshot(
        self, workouts: Optional[List[WorkoutRecord]], error: Optional[StoreError]
    ):
        self.is_loading = False
        if error is not None:
            self.error = error
        else:
            self.error = None
            self.workouts = workouts
            self.statistics = compute_statistics(workouts)
        if self._listener is not None:
            self._listener(workouts, error)
