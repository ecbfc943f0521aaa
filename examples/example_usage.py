"""Example: use the service layer directly (no Flask).

Controllers are a thin layer; the business rules live in the services.
"""

import importlib

from config import get_settings_module

from src.leave_management.leave_management.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    snapshot = container.presence_service.snapshot()
    print(f"{snapshot.reference_date}: {len(snapshot.present)} present, {len(snapshot.absent)} absent")
    for absence in snapshot.absent:
        print(f"  - {absence.profile.name}: {absence.leave_type.value} until {absence.end_date}")

    print(container.leave_service.stats())


if __name__ == "__main__":
    main()
