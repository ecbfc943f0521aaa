import os

from config.config import LEAVE_ENTITLEMENTS, db_config_from_env, env_flag

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DB_CONFIG = db_config_from_env()

DEBUG = False

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json")

AUTO_INIT_DB = env_flag("AUTO_INIT_DB", "0")
AUTO_SEED_DB = env_flag("AUTO_SEED_DB", "0")

NOTIFY_ADMINS_ON_SUBMIT = env_flag("NOTIFY_ADMINS_ON_SUBMIT", "0")

LEAVE_ENTITLEMENTS = dict(LEAVE_ENTITLEMENTS)
