import logging
import threading
import uuid
from typing import Callable, List, Optional

from cryptography.fernet import Fernet, InvalidToken

from workout_tracker.errors import AuthError

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[str]], None]


class IdentityProvider:
    """Resolves the current user and notifies listeners when it changes.

    Custom tokens are Fernet tokens whose payload is the user id, minted by
    whoever holds ``secret_key``. Without a valid token the user is signed in
    anonymously with a freshly minted id.
    """

    def __init__(self, secret_key: Optional[str] = None, token_ttl: Optional[int] = None):
        self._fernet = Fernet(secret_key.encode()) if secret_key else None
        self.token_ttl = token_ttl
        self._user_id: Optional[str] = None
        self._listeners: List[AuthListener] = []
        self._lock = threading.RLock()

    @property
    def current_user_id(self) -> Optional[str]:
        return self._user_id

    def issue_custom_token(self, user_id: str) -> str:
        """Mint a custom sign-in token for a user id."""
        if not self._fernet:
            raise AuthError("Custom tokens are not configured.")
        return self._fernet.encrypt(user_id.encode("utf-8")).decode("utf-8")

    def sign_in_with_custom_token(self, token: str) -> str:
        if not self._fernet:
            raise AuthError("Custom tokens are not configured.")
        try:
            user_id = self._fernet.decrypt(
                token.encode("utf-8"), ttl=self.token_ttl
            ).decode("utf-8")
        except (InvalidToken, UnicodeDecodeError) as e:
            raise AuthError("Invalid or expired sign-in token.") from e
        if not user_id:
            raise AuthError("Invalid or expired sign-in token.")
        self._set_user(user_id)
        logger.info(f"Signed in with custom token as {user_id}")
        return user_id

    def sign_in_anonymously(self) -> str:
        user_id = f"anon-{uuid.uuid4().hex}"
        self._set_user(user_id)
        logger.info(f"Signed in anonymously as {user_id}")
        return user_id

    def sign_in(self, initial_token: Optional[str] = None) -> str:
        """Sign in with the custom token if there is one, else anonymously."""
        if initial_token:
            try:
                return self.sign_in_with_custom_token(initial_token)
            except AuthError as e:
                logger.error(f"Error signing in with custom token: {e}")
                logger.info("Falling back to anonymous sign-in")
        return self.sign_in_anonymously()

    def sign_out(self):
        self._set_user(None)
        logger.info("Signed out")

    def on_auth_state_changed(self, callback: AuthListener) -> Callable[[], None]:
        """Register a listener; it is called now and on every later change.

        Returns an idempotent unsubscribe function.
        """
        with self._lock:
            self._listeners.append(callback)
            current = self._user_id
        callback(current)

        def unsubscribe():
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _set_user(self, user_id: Optional[str]):
        with self._lock:
            if user_id == self._user_id:
                return
            self._user_id = user_id
            listeners = list(self._listeners)
        for listener in listeners:
            listener(user_id)
