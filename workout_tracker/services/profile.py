import logging

from workout_tracker.config.context import AppContext
from workout_tracker.errors import ValidationError
from workout_tracker.models.user import USERNAME_MAX_LENGTH, UserProfile

logger = logging.getLogger(__name__)


def profile_document_id(scope) -> str:
    return f"profile:{scope.app_id}:{scope.user_id}"


class ProfileService:
    def __init__(self, context: AppContext):
        self.context = context

    def set_username(self, username: str) -> UserProfile:
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username cannot be empty.")
        if len(username) > USERNAME_MAX_LENGTH:
            raise ValidationError(
                f"Username must be at most {USERNAME_MAX_LENGTH} characters."
            )

        scope = self.context.scope()
        self.context.store.put(
            "profile", scope, profile_document_id(scope), {"username": username}
        )
        logger.info(f"Username set for {scope.user_id}")
        return UserProfile(username=username)

    def fetch_profile(self) -> UserProfile:
        scope = self.context.scope()
        return UserProfile.from_document(
            self.context.store.get(profile_document_id(scope))
        )
