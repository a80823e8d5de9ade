import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_FILES = {
    "production": ".env.production",
    "staging": ".env.staging",
}

env = os.getenv("ENV", "development")
env_file = ENV_FILES.get(env, ".env.local")

logger.info(f"Environment: {env}")

for candidate in (env_file, ".env"):
    if os.path.exists(candidate):
        logger.info(f"Loading environment from {candidate}")
        load_dotenv(dotenv_path=candidate)
        break
else:
    logger.warning(f"Neither {env_file} nor .env found; using process environment")

if env == "production" and not os.getenv("COUCHDB_URL"):
    raise EnvironmentError("Missing COUCHDB_URL for production environment")

# Document store
COUCHDB_URL = os.getenv("COUCHDB_URL", "http://localhost:5984")
COUCHDB_USER = os.getenv("COUCHDB_USER", "admin")
COUCHDB_PASSWORD = os.getenv("COUCHDB_PASSWORD", "admin")
COUCHDB_DB = os.getenv("COUCHDB_DB", "workout_tracker")

# Heartbeat for the continuous changes feed, in milliseconds
CHANGES_HEARTBEAT_MS = int(os.getenv("CHANGES_HEARTBEAT_MS", "30000"))

# Scope/namespace every document is written under
APP_ID = os.getenv("APP_ID", "default-app-id")

# Identity
INITIAL_AUTH_TOKEN = os.getenv("INITIAL_AUTH_TOKEN")
AUTH_TOKEN_KEY = os.getenv("AUTH_TOKEN_KEY")

# Workout plan assistant
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_API_URL = os.getenv(
    "GEMINI_API_URL",
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "gemini-2.0-flash:generateContent",
)

logger.info("Settings loaded:")
logger.info(f"COUCHDB_URL: {COUCHDB_URL}")
logger.info(f"COUCHDB_USER: {COUCHDB_USER}")
logger.info(
    f"COUCHDB_PASSWORD: {'*' * len(COUCHDB_PASSWORD) if COUCHDB_PASSWORD else None}"
)
logger.info(f"COUCHDB_DB: {COUCHDB_DB}")
logger.info(f"APP_ID: {APP_ID}")
logger.info(f"INITIAL_AUTH_TOKEN set: {bool(INITIAL_AUTH_TOKEN)}")
