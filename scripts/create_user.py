# scripts/create_user.py
# Creates (or resets) a dashboard login: python scripts/create_user.py admin --role client

import argparse
import getpass
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from invitation_service.config import Settings  # noqa: E402
from invitation_service.crud import users_crud  # noqa: E402
from invitation_service.db import Database  # noqa: E402
from invitation_service.logging_setup import setup_logging  # noqa: E402
from invitation_service.models import RoleEnum  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Create or update a login user.")
    parser.add_argument("username")
    parser.add_argument("--role", choices=[r.value for r in RoleEnum], default=RoleEnum.user.value)
    parser.add_argument("--password", default=None, help="Prompted for when omitted")
    args = parser.parse_args()

    password = args.password or getpass.getpass("Password: ")
    if not password:
        print("❌ Password must not be empty.")
        sys.exit(1)

    settings = Settings.from_env()
    setup_logging(settings.log_level)
    database = Database(settings.database_url)
    db = database.session()
    try:
        user = users_crud.create_or_update_user(db, args.username, password, args.role)
        print(f"✔️ User '{user.username}' saved with role '{user.role.value}' (id={user.id}).")
    finally:
        db.close()
        database.dispose()


if __name__ == "__main__":
    main()
