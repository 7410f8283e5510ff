"""Tests for the user administration scripts (create_user, make_admin, list_users)."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from _support import DatabaseTestCase

from sweetshop.models import User
from sweetshop.scripts import create_user, list_users, make_admin


class ScriptTestCase(DatabaseTestCase):
    def run_script(self, module, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with patch.object(module, "SessionLocal", self.SessionFactory):
            with redirect_stdout(out), redirect_stderr(err):
                code = module.main(list(argv)) if argv else module.main()
        return code, out.getvalue(), err.getvalue()

    def stored_role(self, username: str) -> str:
        session = self.new_session()
        try:
            return session.query(User).filter(User.username == username).one().role
        finally:
            session.close()


class TestCreateUser(ScriptTestCase):
    def test_creates_admin(self) -> None:
        code, out, _ = self.run_script(
            create_user, "boss", "boss@example.com", "password123", "admin"
        )
        self.assertEqual(code, 0)
        self.assertIn("role 'admin'", out)
        self.assertEqual(self.stored_role("boss"), "admin")

    def test_duplicate_fails(self) -> None:
        self.add_user("boss")
        code, _, err = self.run_script(create_user, "boss", "boss@example.com", "password123")
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)


class TestMakeAdmin(ScriptTestCase):
    def test_promotes_by_email(self) -> None:
        self.add_user("candyfan")
        code, out, _ = self.run_script(make_admin, "candyfan@example.com")
        self.assertEqual(code, 0)
        self.assertIn("now has role 'admin'", out)
        self.assertEqual(self.stored_role("candyfan"), "admin")

    def test_demote_by_username(self) -> None:
        self.add_admin("boss")
        code, _, _ = self.run_script(make_admin, "boss", "--role", "user")
        self.assertEqual(code, 0)
        self.assertEqual(self.stored_role("boss"), "user")

    def test_unknown_user(self) -> None:
        code, _, err = self.run_script(make_admin, "ghost@example.com")
        self.assertEqual(code, 1)
        self.assertIn("User not found", err)


class TestListUsers(ScriptTestCase):
    def test_empty(self) -> None:
        code, out, _ = self.run_script(list_users)
        self.assertEqual(code, 0)
        self.assertIn("No users found", out)

    def test_lists_roles(self) -> None:
        self.add_user("candyfan")
        self.add_admin("boss")
        code, out, _ = self.run_script(list_users)
        self.assertEqual(code, 0)
        self.assertIn("Found 2 user(s)", out)
        self.assertIn("candyfan <candyfan@example.com> role=user", out)
        self.assertIn("boss <boss@example.com> role=admin", out)


if __name__ == "__main__":
    unittest.main()
