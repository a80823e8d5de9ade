"""
Exercise definition model for the Workout Tracker.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ExerciseDefinition(BaseModel):
    """
    A user-defined exercise in the catalog.

    Workouts refer to exercises by name only, so renaming or deleting a
    definition never changes recorded history.
    """

    id: Optional[str] = None
    name: str
    description: Optional[str] = ""
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    class Config:
        populate_by_name = True
        json_encoders = {datetime: lambda v: v.isoformat()}

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "ExerciseDefinition":
        """Create an ExerciseDefinition from a stored document."""
        return cls(
            id=doc.get("_id", doc.get("id")),
            name=doc.get("name", ""),
            description=doc.get("description") or "",
            created_at=doc.get("createdAt"),
        )

    def to_document(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description or ""}
