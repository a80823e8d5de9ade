"""
Application entry point for the Workout Tracker.
"""

import logging

from workout_tracker.config.config import APP_ID, AUTH_TOKEN_KEY, INITIAL_AUTH_TOKEN
from workout_tracker.config.context import AppContext
from workout_tracker.config.database import Database
from workout_tracker.services.auth import IdentityProvider
from workout_tracker.tracker import WorkoutTracker

LOG_FILE = "workout_tracker.log"


def configure_logging(log_file: str = LOG_FILE):
    """Log to the console and to a file, adding each handler only once."""
    logger = logging.getLogger()
    logger.setLevel(logging.INFO)

    handler_types = [type(h) for h in logger.handlers]

    if logging.StreamHandler not in handler_types:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.INFO)
        console_handler.setFormatter(
            logging.Formatter("%(levelname)s:%(name)s:%(message)s")
        )
        logger.addHandler(console_handler)

    if logging.FileHandler not in handler_types:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s:%(name)s:%(message)s")
        )
        logger.addHandler(file_handler)

    return logger


def build_context() -> AppContext:
    """Connect to the store and set up identity. Nobody is signed in yet."""
    store = Database()
    identity = IdentityProvider(AUTH_TOKEN_KEY)
    return AppContext(store, identity, APP_ID)


def create_app() -> WorkoutTracker:
    configure_logging()
    logger = logging.getLogger(__name__)
    try:
        context = build_context()
        tracker = WorkoutTracker(context)
        tracker.start()
        context.identity.sign_in(INITIAL_AUTH_TOKEN)
        logger.info("Workout Tracker started")
        return tracker
    except Exception as e:
        logger.error(f"Failed to start Workout Tracker: {str(e)}", exc_info=True)
        raise
