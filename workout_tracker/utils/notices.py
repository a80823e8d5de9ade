"""
Transient, auto-dismissing messages shown to the user after an action.
"""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

DUPLICATE_NOTICE_SECONDS = 3
DELETE_NOTICE_SECONDS = 4
DEFAULT_NOTICE_SECONDS = 5


class NoticeKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class Notice(BaseModel):
    text: str
    kind: NoticeKind = NoticeKind.SUCCESS
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    duration_seconds: float = DEFAULT_NOTICE_SECONDS

    @classmethod
    def success(cls, text: str, duration_seconds: float = DEFAULT_NOTICE_SECONDS):
        return cls(text=text, kind=NoticeKind.SUCCESS, duration_seconds=duration_seconds)

    @classmethod
    def error(cls, text: str, duration_seconds: float = DEFAULT_NOTICE_SECONDS):
        return cls(text=text, kind=NoticeKind.ERROR, duration_seconds=duration_seconds)

    @property
    def is_error(self) -> bool:
        return self.kind == NoticeKind.ERROR

    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.duration_seconds)

    def expired(self, now: Optional[datetime] = None) -> bool:
        """Whether the notice should have been dismissed by ``now``."""
        now = now or datetime.now(timezone.utc)
        return now >= self.expires_at()
