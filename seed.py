"""
Create the admin account if it does not exist yet.

    portfolio-seed-admin          # uses ADMIN_EMAIL / ADMIN_PASSWORD
"""

import logging
import sys

from config import get_settings
from database import Database, DatabaseConfigurationError
from schemas import Admin
from security import ADMIN_COLLECTION, find_admin, hash_password, normalize_email

logger = logging.getLogger(__name__)


def seed_admin(db: Database, email: str, password: str) -> bool:
    """Insert the admin record unless one already exists. Returns True if created."""
    if find_admin(db, email):
        logger.info("Admin already exists")
        return False
    admin = Admin(email=normalize_email(email), password_hash=hash_password(password))
    db.create_document(ADMIN_COLLECTION, admin)
    logger.info("Admin created successfully")
    return True


def main() -> int:
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    database = Database(settings.mongo_uri, settings.database_name)
    try:
        database.connect()
    except DatabaseConfigurationError as exc:
        logger.error("%s", exc)
        return 1
    try:
        database.ensure_indexes()
        seed_admin(database, settings.admin_email, settings.admin_password)
    finally:
        database.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
