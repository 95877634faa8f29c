"""
Create (or reset the password of) a platform admin account
Usage: python create_admin.py <email> [name]
The password is prompted for, or read from ADMIN_PASSWORD when set.
"""
import getpass
import logging
import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from carelink import models, models_event  # noqa: F401
from carelink.database import Base, SessionLocal, engine
from carelink.domain.admin.service import AdminService
from carelink.shared.validators import validate_email

logging.basicConfig(level=logging.INFO, format='%(message)s')
logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def create_admin(email: str, password: str, name: str):
    """Create the admins table if needed, then upsert the account"""
    Base.metadata.create_all(bind=engine, checkfirst=True)

    db = SessionLocal()
    try:
        admin, created = AdminService(db).upsert_admin(email, password, name)
    finally:
        db.close()

    if created:
        logger.info(f"✅ Admin {admin.email} created (id={admin.id})")
    else:
        logger.info(f"✅ Password reset for admin {admin.email}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        logger.error("Usage: python create_admin.py <email> [name]")
        sys.exit(1)

    try:
        email = validate_email(sys.argv[1])
    except ValueError as e:
        logger.error(f"❌ {e}")
        sys.exit(1)

    name = sys.argv[2] if len(sys.argv) > 2 else "Administrator"
    password = os.getenv("ADMIN_PASSWORD") or getpass.getpass("Password: ")
    if len(password) < MIN_PASSWORD_LENGTH:
        logger.error(f"❌ Password must be at least {MIN_PASSWORD_LENGTH} characters")
        sys.exit(1)

    try:
        create_admin(email, password, name)
    except Exception as e:
        logger.error(f"❌ Failed to create admin: {e}")
        sys.exit(1)
