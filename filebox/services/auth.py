"""
Account service: registration and credential checks.

Passwords are hashed with bcrypt; emails are stored lower-cased so lookups
are case-insensitive.
"""
import bcrypt
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from filebox.exceptions import ValidationError
from filebox.logging_config import setup_logging
from filebox.models.user import User

logger = setup_logging()


def hash_password(password: str) -> str:
    # gensalt() produces a fresh random salt per hash
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())


def register_user(db: Session, name: str, email: str, password: str) -> User:
    """
    Create a new user account.

    Raises:
        ValidationError: If the email is already registered
    """
    email = email.lower()

    existing_user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if existing_user:
        raise ValidationError("User already exists")

    user = User(name=name, email=email, hashed_password=hash_password(password))

    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        # Lost a race against a concurrent registration with the same email
        db.rollback()
        raise ValidationError("User already exists")

    logger.info(f"User registered: user_id={user.id}")
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Return the user if the credentials match, None otherwise."""
    user = db.execute(select(User).where(User.email == email.lower())).scalar_one_or_none()

    if not user or not verify_password(password, user.hashed_password):
        return None

    return user
