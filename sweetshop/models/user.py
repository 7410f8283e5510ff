"""ORM model for application users (auth and RBAC)."""

from sqlalchemy import Column, DateTime, Integer, String

from sweetshop.models.base import Base, utcnow


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 'admin' or 'user'. Changed only by the make_admin script.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
