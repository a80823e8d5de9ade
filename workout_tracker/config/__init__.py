"""
Configuration package for the Workout Tracker application.
"""

from .config import (
    APP_ID,
    AUTH_TOKEN_KEY,
    CHANGES_HEARTBEAT_MS,
    COUCHDB_DB,
    COUCHDB_PASSWORD,
    COUCHDB_URL,
    COUCHDB_USER,
    GEMINI_API_KEY,
    GEMINI_API_URL,
    INITIAL_AUTH_TOKEN,
)
