"""Reference principal collaborator: user lookup, registration and login checks."""

from __future__ import annotations

from typing import Any, Protocol
from uuid import UUID, uuid4
import logging

from sqlalchemy.orm import Session

from seshlock.core.security import hash_password, verify_password
from seshlock.models.user import User

logger = logging.getLogger(__name__)


class PrincipalAuthenticator(Protocol):
    """Verifies credentials and returns the matching principal, or ``None``."""

    def __call__(self, db: Session, email: str, password: str) -> Any | None: ...


def find_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def create_user(db: Session, email: str, password: str) -> User:
    user = User(
        id=uuid4(),
        email=email.strip().lower(),
        password_hash=hash_password(password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("User created: %s", user.id)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    user = find_user_by_email(db, email)
    if not user:
        logger.warning("Login failed: user not found")
        return None
    if not verify_password(password, user.password_hash):
        logger.warning("Login failed: invalid password (user=%s)", user.id)
        return None
    logger.info("User authenticated: %s", user.id)
    return user


def delete_user(db: Session, user_id: str) -> bool:
    """Delete a user; the database cascade removes its tokens."""
    try:
        user_uuid = UUID(user_id)
    except ValueError:
        return False
    user = db.get(User, user_uuid)
    if not user:
        logger.warning("User delete failed (not found): %s", user_id)
        return False
    db.delete(user)
    db.commit()
    logger.info("User deleted: %s", user_uuid)
    return True
