"""Identity store: register users, verify passwords, resolve tokens and manage roles."""

import logging

import jwt
from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sweetshop.core.errors import Conflict, InvalidInput, NotFound, Unauthenticated
from sweetshop.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    ROLE_USER,
    ROLES,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
    decode_access_token,
    hash_password,
    verify_password,
)
from sweetshop.models.user import User

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"


def _normalize_email(email: str) -> str:
    return email.strip().lower()


def register_user(
    db: Session,
    username: str,
    email: str,
    password: str,
    role: str = ROLE_USER,
) -> User:
    """
    Create a user with a bcrypt-hashed password.

    Raises InvalidInput for bad lengths or role, Conflict if the username or
    email is already taken (detected by the unique indexes, not a prior read).
    """
    username = (username or "").strip()
    if not (USERNAME_MIN_LEN <= len(username) <= USERNAME_MAX_LEN):
        raise InvalidInput(
            f"Username must be {USERNAME_MIN_LEN}-{USERNAME_MAX_LEN} characters"
        )
    if not (PASSWORD_MIN_LEN <= len(password or "") <= PASSWORD_MAX_LEN):
        raise InvalidInput(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters"
        )
    if role not in ROLES:
        raise InvalidInput(f"Role must be one of {list(ROLES)}")

    user = User(
        username=username,
        email=_normalize_email(email),
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        raise Conflict("User with this email or username already exists") from e
    logger.info("Registered user: %s (role=%s)", user.id, user.role)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials, else raise Unauthenticated."""
    user = db.scalar(select(User).where(User.email == _normalize_email(email)))
    if user is None or not verify_password(password, user.password_hash):
        raise Unauthenticated(INVALID_CREDENTIALS)
    return user


def resolve_token(db: Session, token: str) -> User:
    """
    Resolve a bearer token to the current user row.

    Raises Unauthenticated when the token is invalid, expired, malformed or
    refers to a user that no longer exists. The role is whatever the row says
    now, never what it was when the token was issued.
    """
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError as e:
        raise Unauthenticated("Invalid or expired token") from e
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError) as e:
        raise Unauthenticated("Invalid token payload") from e
    user = db.get(User, user_id, populate_existing=True)
    if user is None:
        raise Unauthenticated("User not found")
    return user


def find_user(db: Session, identifier: str) -> User | None:
    """Look a user up by email or username."""
    identifier = identifier.strip()
    return db.scalar(
        select(User).where(
            or_(User.email == _normalize_email(identifier), User.username == identifier)
        )
    )


def set_role(db: Session, identifier: str, role: str) -> User:
    """Change a user's role (out-of-band admin action). Applies on the next request."""
    if role not in ROLES:
        raise InvalidInput(f"Role must be one of {list(ROLES)}")
    user = find_user(db, identifier)
    if user is None:
        raise NotFound(f"User not found: {identifier}")
    user.role = role
    db.commit()
    logger.info("Role changed: user=%s role=%s", user.id, role)
    return user


def list_users(db: Session) -> list[User]:
    return list(db.scalars(select(User).order_by(User.id)).all())
