from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

USERNAME_MAX_LENGTH = 20


class UserProfile(BaseModel):
    username: Optional[str] = Field(default=None, max_length=USERNAME_MAX_LENGTH)

    @classmethod
    def from_document(cls, doc: Optional[Dict[str, Any]]) -> "UserProfile":
        """Create a UserProfile from a stored document, empty when there is none."""
        if not doc:
            return cls()
        return cls(username=doc.get("username"))
