"""
First admin user creation on application startup.
This ensures there's always at least one admin user available.
"""
import logging
from sqlalchemy.exc import SQLAlchemyError
from app.core.database import SessionLocal
from app.models.user import User, UserRoleEnum
from app.core.security import get_password_hash

logger = logging.getLogger(__name__)


def create_first_admin(admin_email: str, admin_password: str, session_factory=SessionLocal):
    """
    Create the first admin user if no admins exist in the database.
    """
    db = session_factory()
    try:
        existing_admin = db.query(User).filter(User.role == UserRoleEnum.ADMIN).first()
        if existing_admin:
            logger.info("Admin user already exists, skipping first admin creation")
            return

        if not admin_email or not admin_password:
            logger.warning(
                "FIRST_ADMIN_EMAIL and FIRST_ADMIN_PASSWORD not provided. "
                "Skipping first admin creation."
            )
            return

        admin_email = admin_email.lower()
        existing_user = db.query(User).filter(User.email == admin_email).first()
        if existing_user:
            existing_user.role = UserRoleEnum.ADMIN
            existing_user.is_active = True
            existing_user.is_verified = True
            db.commit()
            logger.info(f"Upgraded existing user {admin_email} to admin privileges")
            return

        admin_user = User(
            email=admin_email,
            username=admin_email.split("@")[0],
            password_hash=get_password_hash(admin_password),
            first_name="System",
            last_name="Administrator",
            role=UserRoleEnum.ADMIN,
            is_active=True,
            is_verified=True,
        )
        db.add(admin_user)
        db.commit()
        logger.info(f"Created first admin user: {admin_email}")

    except SQLAlchemyError as e:
        logger.error(f"Error creating first admin user: {e}")
        db.rollback()
    finally:
        db.close()
