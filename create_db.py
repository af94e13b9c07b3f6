# create_db.py

# =================================================================================
# 🏗️ DATABASE CREATION SCRIPT
# ---------------------------------------------------------------------------------
# Creates every table declared in invitation_service/models.py on the database
# pointed to by DATABASE_URL. Meant for local development; production schemas
# are managed with Alembic (`alembic upgrade head`).
# =================================================================================

from invitation_service.config import Settings
from invitation_service.db import Database
from invitation_service.logging_setup import setup_logging


def create_database_tables():
    """Creates all tables registered on `Base`."""
    settings = Settings.from_env()
    setup_logging(settings.log_level)

    database = Database(settings.database_url)
    database.log_path()
    print("Creating tables...")
    database.create_all()
    database.dispose()
    print("✔️ Database and tables created.")


if __name__ == "__main__":
    create_database_tables()
