import os

from config.config import LEAVE_ENTITLEMENTS, db_config_from_env

SECRET_KEY = "test-secret"

DB_CONFIG = db_config_from_env(default_database="leave_db_test")

DEBUG = False
TESTING = True

LOG_LEVEL = os.getenv("LOG_LEVEL", "WARNING")
LOG_FORMAT = "text"

AUTO_INIT_DB = False
AUTO_SEED_DB = False

NOTIFY_ADMINS_ON_SUBMIT = False

LEAVE_ENTITLEMENTS = dict(LEAVE_ENTITLEMENTS)
