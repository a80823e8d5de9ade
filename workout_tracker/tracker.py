"""
User-facing actions of the Workout Tracker.

Every action returns a Notice instead of raising, so a failed store call or
a bad input never takes the application down.
"""

import logging
from typing import Optional

from workout_tracker.config.context import AppContext
from workout_tracker.services.assistant import PlanAssistant, PlanPreferences
from workout_tracker.services.catalog import ExerciseCatalog
from workout_tracker.services.profile import ProfileService
from workout_tracker.services.session import WorkoutSession
from workout_tracker.services.sync import HistorySynchronizer
from workout_tracker.utils.actions import user_action
from workout_tracker.utils.notices import DELETE_NOTICE_SECONDS, Notice

logger = logging.getLogger(__name__)


class WorkoutTracker:
    def __init__(self, context: AppContext, assistant: Optional[PlanAssistant] = None):
        self.context = context
        self.catalog = ExerciseCatalog(context)
        self.history = HistorySynchronizer(context)
        self.profile = ProfileService(context)
        self.assistant = assistant or PlanAssistant()
        self.session = WorkoutSession(context)
        self.plan: Optional[str] = None
        self._live = True
        self._unsubscribe_auth = None

    def start(self, live: bool = True):
        """Follow the signed-in user: mirror their history while signed in."""
        self._live = live
        self._unsubscribe_auth = self.context.identity.on_auth_state_changed(
            self._on_auth_state_changed
        )

    def stop(self):
        if self._unsubscribe_auth is not None:
            self._unsubscribe_auth()
            self._unsubscribe_auth = None
        self.history.unsubscribe()

    def _on_auth_state_changed(self, user_id):
        if user_id is None:
            logger.info("User signed out; stopping history sync")
            self.history.unsubscribe()
            return
        logger.info(f"User {user_id} signed in; starting history sync")
        self.session = WorkoutSession(self.context)
        self.history.subscribe(start=self._live)

    def new_session(self, workout_date=None) -> WorkoutSession:
        self.session = WorkoutSession(self.context, workout_date)
        return self.session

    @user_action(success="Exercise added successfully!")
    def add_exercise(self, name: str, description: str = ""):
        self.catalog.add_exercise(name, description)

    @user_action(duration_seconds=DELETE_NOTICE_SECONDS)
    def delete_exercise(self, exercise_id: str, name: str):
        self.catalog.delete_exercise(exercise_id)
        return Notice.success(f"'{name}' deleted successfully!", DELETE_NOTICE_SECONDS)

    @user_action(success="Workout logged successfully!")
    def log_workout(self):
        if self.session.submit() is None:
            return Notice.error("This workout is already being saved.")

    @user_action(success="Workout deleted.", duration_seconds=DELETE_NOTICE_SECONDS)
    def delete_workout(self, workout_id: str):
        self.history.delete_workout(workout_id)

    @user_action(success="Username set successfully!")
    def set_username(self, username: str):
        self.profile.set_username(username)

    @user_action(success="Workout plan generated successfully!")
    def generate_plan(self, prefs: PlanPreferences):
        self.plan = None
        self.plan = self.assistant.generate_plan(prefs)
