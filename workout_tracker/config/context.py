"""
Application context shared by every service.

The context is built once at startup and handed to each service explicitly;
nothing looks the store or the identity provider up globally.
"""

import logging
from typing import NamedTuple

from workout_tracker.errors import AuthError

logger = logging.getLogger(__name__)


class Scope(NamedTuple):
    """The (namespace, user) pair every document is stored under."""

    app_id: str
    user_id: str


class AppContext:
    def __init__(self, store, identity, app_id: str):
        self.store = store
        self.identity = identity
        self.app_id = app_id

    @property
    def user_id(self):
        return self.identity.current_user_id

    def scope(self) -> Scope:
        """Return the current scope, or raise AuthError if identity is unresolved."""
        if not self.user_id:
            logger.warning("Store operation attempted before sign-in completed")
            raise AuthError("User not authenticated. Please wait.")
        if not self.app_id:
            logger.error("No APP_ID configured")
            raise AuthError("App ID not available. Please refresh the page.")
        return Scope(self.app_id, self.user_id)
