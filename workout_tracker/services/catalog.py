import logging
from typing import List, Optional

from workout_tracker.config.context import AppContext
from workout_tracker.errors import ValidationError
from workout_tracker.models.exercise import ExerciseDefinition
from workout_tracker.services.sync import SnapshotListener, Subscription

logger = logging.getLogger(__name__)


def sort_exercises(exercises: List[ExerciseDefinition]) -> List[ExerciseDefinition]:
    return sorted(exercises, key=lambda exercise: exercise.name.casefold())


class ExerciseCatalog:
    """The user's own exercise definitions."""

    def __init__(self, context: AppContext):
        self.context = context

    def add_exercise(self, name: str, description: Optional[str] = "") -> ExerciseDefinition:
        name = (name or "").strip()
        description = (description or "").strip()
        if not name:
            raise ValidationError("Exercise name cannot be empty.")

        scope = self.context.scope()
        exercise = ExerciseDefinition(name=name, description=description)
        exercise.id = self.context.store.insert(
            "exercise", scope, exercise.to_document()
        )
        logger.info(f"Added exercise '{name}' for {scope.user_id}")
        return exercise

    def delete_exercise(self, exercise_id: str) -> bool:
        """Delete a definition. Workouts that used it keep its name."""
        if not exercise_id:
            raise ValidationError("Cannot delete: missing exercise ID.")
        self.context.scope()
        return self.context.store.delete(exercise_id)

    def subscribe(
        self, listener: SnapshotListener, start: bool = True
    ) -> Subscription[ExerciseDefinition]:
        """Live, name-ordered view of the catalog."""
        subscription = Subscription(
            self.context.store,
            "exercise",
            self.context.scope(),
            parse=ExerciseDefinition.from_document,
            order=sort_exercises,
            listener=listener,
            name="exercise catalog",
        )
        if start:
            subscription.start()
        return subscription
