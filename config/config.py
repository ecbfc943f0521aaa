import os


def env_flag(name: str, default: str = "0") -> bool:
    return bool(int(os.environ.get(name, default)))


def db_config_from_env(*, default_password: str = "", default_database: str = "leave_db") -> dict:
    return {
        "host": os.environ.get("DB_HOST", "localhost"),
        "port": int(os.environ.get("DB_PORT", "3306")),
        "user": os.environ.get("DB_USER", "root"),
        "password": os.environ.get("DB_PASSWORD", default_password),
        "database": os.environ.get("DB_NAME", default_database),
        # Seconds; network calls surface a failure instead of hanging.
        "connect_timeout": int(os.environ.get("DB_CONNECT_TIMEOUT", "10")),
    }


# Yearly entitlements in days; keys are leave type values.
LEAVE_ENTITLEMENTS = {
    "annual": int(os.environ.get("LEAVE_ANNUAL_DAYS", "25")),
    "sick": int(os.environ.get("LEAVE_SICK_DAYS", "10")),
    "personal": int(os.environ.get("LEAVE_PERSONAL_DAYS", "5")),
}
