"""
Error taxonomy for the Workout Tracker.

Every error carries a message that is safe to show to the user as-is.
"""


class WorkoutTrackerError(Exception):
    """Base class for all errors surfaced to the user."""

    default_message = "Something went wrong. Please try again."

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(WorkoutTrackerError):
    """User input violated a constraint. Never touches the store."""

    default_message = "Please check your input."


class AuthError(WorkoutTrackerError):
    """Identity is not resolved when a store operation is attempted."""

    default_message = "Authentication error. Please refresh the page."


class StoreError(WorkoutTrackerError):
    """A read, write or subscription against the store failed."""

    default_message = "Could not reach the database. Please try again."


class AssistantError(WorkoutTrackerError):
    """The workout plan assistant could not produce a plan."""

    default_message = "Failed to generate a workout plan. Please try again."
