"""
Draft of a workout being composed before it is submitted.

A draft belongs to a single composing flow and is never shared. Numeric
fields may be cleared by the user while editing; a cleared field is held as
``BLANK`` and only turned into 0 when the draft is submitted.
"""

import logging
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel

from workout_tracker.config.context import AppContext
from workout_tracker.errors import ValidationError
from workout_tracker.models.exercise import ExerciseDefinition
from workout_tracker.models.workout import PerformedExercise, WorkoutRecord, at_noon
from workout_tracker.utils.notices import DUPLICATE_NOTICE_SECONDS, Notice

logger = logging.getLogger(__name__)


class Blank(str, Enum):
    """A numeric field the user has emptied. Compares equal to ``""``."""

    VALUE = ""


BLANK = Blank.VALUE

NUMERIC_FIELDS = ("sets", "reps", "weight")

DraftNumber = Union[Blank, float]


class DraftExercise(BaseModel):
    exercise_name: str
    sets: DraftNumber = 1.0
    reps: DraftNumber = 1.0
    weight: DraftNumber = BLANK
    notes: str = ""

    def to_performed(self) -> PerformedExercise:
        return PerformedExercise(
            exercise_name=self.exercise_name,
            sets=_normalize(self.sets),
            reps=_normalize(self.reps),
            weight=_normalize(self.weight),
            notes=self.notes,
        )


def _normalize(value: DraftNumber) -> float:
    if isinstance(value, str) and not value.strip():
        return 0.0
    return float(value)


def parse_draft_number(value) -> DraftNumber:
    """Parse raw input for a numeric field.

    Empty input stays ``BLANK``; anything else is parsed as a float and
    clamped to zero or more, with unparseable input counting as 0.
    """
    if value is None or value is BLANK:
        return BLANK
    if isinstance(value, str):
        value = value.strip()
        if value == "":
            return BLANK
    try:
        number = float(value)
    except (TypeError, ValueError):
        logger.debug(f"Treating non-numeric input {value!r} as 0")
        return 0.0
    return max(0.0, number)


def parse_workout_date(value: Union[date, datetime, str, None]) -> date:
    if value is None:
        return date.today()
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value.strip())
    except (AttributeError, ValueError) as e:
        raise ValidationError("Please enter a valid workout date.") from e


class WorkoutSession:
    def __init__(self, context: AppContext, workout_date=None):
        self.context = context
        self.workout_date: date = parse_workout_date(workout_date)
        self.exercises: List[DraftExercise] = []
        self.notice: Optional[Notice] = None
        self._submitting = False

    @property
    def is_submitting(self) -> bool:
        return self._submitting

    def set_date(self, value):
        self.workout_date = parse_workout_date(value)

    def add_exercise(self, catalog_entry: Union[ExerciseDefinition, str]) -> bool:
        """Append an exercise with default metrics.

        An exercise already in the draft is not added again; instead a
        duplicate warning is left in ``notice`` and False is returned.
        """
        name = (
            catalog_entry.name
            if isinstance(catalog_entry, ExerciseDefinition)
            else catalog_entry
        )
        if any(item.exercise_name == name for item in self.exercises):
            self.notice = Notice.error(
                f"'{name}' is already added to this workout.",
                DUPLICATE_NOTICE_SECONDS,
            )
            logger.info(f"Duplicate exercise '{name}' not added to draft")
            return False

        self.exercises.append(DraftExercise(exercise_name=name))
        self.notice = None
        return True

    def update_field(self, index: int, field: str, value):
        """Set one field of a draft entry.

        Numeric fields are parsed; every other field of the entry is stored
        verbatim. Names that are not fields of an entry are rejected.
        """
        entry = self._entry(index)
        if field in NUMERIC_FIELDS:
            setattr(entry, field, parse_draft_number(value))
        elif field in DraftExercise.model_fields:
            setattr(entry, field, value)
        else:
            raise ValidationError(f"Unknown exercise field: {field}")

    def remove_exercise(self, index: int):
        self._entry(index)
        del self.exercises[index]

    def build_record(self, user_id: str) -> WorkoutRecord:
        """Freeze the draft into a record, turning blank numbers into 0."""
        return WorkoutRecord(
            user_id=user_id,
            date=at_noon(self.workout_date),
            exercises_performed=[entry.to_performed() for entry in self.exercises],
        )

    def submit(self) -> Optional[WorkoutRecord]:
        """Store the draft as one workout and start a fresh draft.

        Returns None without writing while an earlier submit is in flight.
        There is no deduplication: retrying after a failure whose write did
        reach the store records the workout twice.
        """
        if self._submitting:
            logger.warning("Workout submission already in progress")
            return None
        if not self.exercises:
            raise ValidationError("Please add at least one exercise to your workout.")

        scope = self.context.scope()
        self._submitting = True
        try:
            record = self.build_record(scope.user_id)
            record.id = self.context.store.insert(
                "workout", scope, record.to_document()
            )
        finally:
            self._submitting = False

        logger.info(
            f"Logged workout {record.id} with {len(record.exercises_performed)} exercises"
        )
        self.reset()
        self.notice = Notice.success("Workout logged successfully!")
        return record

    def reset(self):
        self.workout_date = date.today()
        self.exercises = []

    def _entry(self, index: int) -> DraftExercise:
        if not 0 <= index < len(self.exercises):
            raise ValidationError(f"No exercise at position {index}.")
        return self.exercises[index]
