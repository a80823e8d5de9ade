"""
Action boundary: user-triggered operations never raise into the caller.
"""

import functools
import logging

from workout_tracker.errors import WorkoutTrackerError
from workout_tracker.utils.notices import DEFAULT_NOTICE_SECONDS, Notice

logger = logging.getLogger(__name__)


def user_action(success: str = None, duration_seconds: float = DEFAULT_NOTICE_SECONDS):
    """Decorator turning the outcome of a user action into a Notice.

    The wrapped function's own Notice is passed through; any other return
    value becomes a success Notice with the ``success`` text. Known errors
    become error Notices with their message; anything else is logged with a
    traceback and reported generically.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                result = func(*args, **kwargs)
            except WorkoutTrackerError as e:
                logger.warning(f"{func.__name__} failed: {e.message}")
                return Notice.error(e.message, duration_seconds)
            except Exception as e:
                logger.error(f"Error in {func.__name__}: {e}", exc_info=True)
                return Notice.error(
                    WorkoutTrackerError.default_message, duration_seconds
                )
            if isinstance(result, Notice):
                return result
            return Notice.success(success or "Done.", duration_seconds)

        return wrapper

    return decorator
