"""Tests for the create_user command."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from app.core.security import verify_password
from app.models import User
from app.scripts import create_user
from tests.support import DatabaseTestCase

ARGS = ["root", "root@example.com", "rootpass", "Root", "Admin"]


class TestCreateUserCommand(DatabaseTestCase):
    def setUp(self) -> None:
        super().setUp()
        session_factory = patch.object(create_user, "SessionLocal", self.SessionLocal)
        session_factory.start()
        self.addCleanup(session_factory.stop)

    def _run(self, argv: list[str]) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = create_user.main(argv)
        return code, out.getvalue(), err.getvalue()

    def test_creates_admin(self) -> None:
        code, out, _ = self._run(ARGS + ["admin"])
        self.assertEqual(code, 0)
        self.assertIn("role 'admin'", out)
        user = self.db.query(User).filter(User.username == "root").one()
        self.assertEqual(user.role, "admin")
        self.assertTrue(verify_password("rootpass", user.password_hash))

    def test_role_defaults_to_user(self) -> None:
        self.assertEqual(self._run(ARGS)[0], 0)
        self.assertEqual(self.db.query(User).one().role, "user")

    def test_duplicate_is_reported(self) -> None:
        self._run(ARGS)
        code, _, err = self._run(ARGS)
        self.assertEqual(code, 1)
        self.assertIn("already exists", err)

    def test_invalid_input_is_reported(self) -> None:
        code, _, err = self._run(["ab", "not-an-email", "123", "Root", "Admin"])
        self.assertEqual(code, 1)
        self.assertIn("username:", err)
        self.assertIn("email:", err)
        self.assertIn("password:", err)
        self.assertEqual(self.db.query(User).count(), 0)


if __name__ == "__main__":
    unittest.main()
