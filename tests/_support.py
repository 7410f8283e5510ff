"""Shared helpers for tests: a throwaway file-backed SQLite database per test case."""

import os
import tempfile
import unittest
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import NullPool

from sweetshop.core.security import ROLE_ADMIN, ROLE_USER, create_access_token
from sweetshop.models import Base
from sweetshop.services.identity import register_user
from sweetshop.services.inventory import create_sweet


class DatabaseTestCase(unittest.TestCase):
    """
    Creates a fresh SQLite file (not :memory:) so that several threads can
    open their own connections to the same database. NullPool gives every
    session its own connection, so thread count is not capped by a pool.
    """

    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        path = os.path.join(self._tmpdir.name, "sweetshop-test.db")
        self.engine = create_engine(
            f"sqlite:///{path}",
            connect_args={"check_same_thread": False, "timeout": 30},
            poolclass=NullPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionFactory = sessionmaker(
            bind=self.engine,
            autoflush=False,
            expire_on_commit=False,
        )
        self.db: Session = self.SessionFactory()

    def tearDown(self) -> None:
        self.db.close()
        self.engine.dispose()
        self._tmpdir.cleanup()

    def new_session(self) -> Session:
        return self.SessionFactory()

    def add_sweet(
        self,
        name: str = "Chocolate Bar",
        category: str = "Chocolate",
        price: str = "5.99",
        quantity: int | None = 100,
    ):
        return create_sweet(self.db, name, category, Decimal(price), quantity)

    def add_user(self, username: str = "testuser", role: str = ROLE_USER):
        return register_user(
            self.db,
            username=username,
            email=f"{username}@example.com",
            password="password123",
            role=role,
        )

    def add_admin(self, username: str = "admin"):
        return self.add_user(username, role=ROLE_ADMIN)

    @staticmethod
    def token_for(user) -> str:
        return create_access_token(sub=user.id)

    @staticmethod
    def auth_header(token: str) -> dict[str, str]:
        return {"Authorization": f"Bearer {token}"}
