import os

from config.config import LEAVE_ENTITLEMENTS, db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = db_config_from_env(default_password="")

DEBUG = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "1")
# Optional: also seed demo data on startup
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

NOTIFY_ADMINS_ON_SUBMIT = env_flag("NOTIFY_ADMINS_ON_SUBMIT", "1")

LEAVE_ENTITLEMENTS = dict(LEAVE_ENTITLEMENTS)
