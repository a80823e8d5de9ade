import logging
from datetime import date as date_type
from datetime import datetime, time
from numbers import Number
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

# Workouts are stored at midday so timezone shifts never move them to another day
WORKOUT_TIME_OF_DAY = time(12, 0)


def at_noon(day: date_type) -> datetime:
    """Return the stored timestamp for a calendar day."""
    if isinstance(day, datetime):
        day = day.date()
    return datetime.combine(day, WORKOUT_TIME_OF_DAY)


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            logger.warning(f"Ignoring unparseable date: {value!r}")
            return None
    return None


def _stored_number(value: Any) -> Optional[float]:
    if isinstance(value, Number) and not isinstance(value, bool):
        return float(value)
    if value is not None:
        logger.debug(f"Ignoring non-numeric stored value: {value!r}")
    return None


class PerformedExercise(BaseModel):
    exercise_name: str = Field(default="", alias="exerciseName")
    sets: Optional[float] = 0.0
    reps: Optional[float] = 0.0
    weight: Optional[float] = 0.0
    notes: Optional[str] = ""

    class Config:
        populate_by_name = True

    @field_validator("exercise_name", mode="before")
    @classmethod
    def name_as_text(cls, value):
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("sets", "reps", "weight", mode="before")
    @classmethod
    def numbers_only(cls, value):
        """Only real numbers are kept; anything else is held as None."""
        return _stored_number(value)

    @field_validator("notes", mode="before")
    @classmethod
    def notes_default(cls, value):
        if not value:
            return ""
        return value if isinstance(value, str) else str(value)


class WorkoutRecord(BaseModel):
    """A submitted workout. Records are never edited after creation."""

    id: Optional[str] = None
    user_id: Optional[str] = Field(default=None, alias="userId")
    date: Optional[datetime] = None
    exercises_performed: List[PerformedExercise] = Field(
        default_factory=list, alias="exercisesPerformed"
    )
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    class Config:
        populate_by_name = True
        json_encoders = {datetime: lambda v: v.isoformat()}

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "WorkoutRecord":
        """Create a WorkoutRecord from a stored document.

        Exercise entries that are not objects are dropped rather than
        failing the whole record.
        """
        performed = doc.get("exercisesPerformed") or []
        if not isinstance(performed, list):
            logger.warning(
                f"Workout {doc.get('_id')} has malformed exercisesPerformed: {performed!r}"
            )
            performed = []
        return cls(
            id=doc.get("_id", doc.get("id")),
            user_id=doc.get("userId"),
            date=_parse_datetime(doc.get("date")),
            exercises_performed=[
                PerformedExercise.model_validate(exercise)
                for exercise in performed
                if isinstance(exercise, dict)
            ],
            created_at=_parse_datetime(doc.get("createdAt")),
        )

    def to_document(self) -> Dict[str, Any]:
        """Convert to the stored shape; the store stamps id and createdAt."""
        return {
            "userId": self.user_id,
            "date": self.date.isoformat() if self.date else None,
            "exercisesPerformed": [
                exercise.model_dump(by_alias=True)
                for exercise in self.exercises_performed
            ],
        }
