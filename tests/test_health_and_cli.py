"""Tests for the health endpoint and the create_account CLI."""

import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from support import API, ApiTestCase, StoreTestCase

from app.core.security import verify_password
from app.models import Account
from app.scripts import create_account


class TestHealth(ApiTestCase):
    def test_reports_connected_store(self) -> None:
        resp = self.client.get(f"{API}/health/")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "ok")
        self.assertEqual(resp.json()["database"], "connected")

    def test_root(self) -> None:
        self.assertEqual(self.client.get("/").json(), {"message": "Order Approvals API"})


class TestCreateAccountCli(StoreTestCase):
    def _run(self, *argv: str) -> tuple[int, str, str]:
        out, err = io.StringIO(), io.StringIO()
        with patch.object(create_account, "SessionLocal", self.SessionLocal):
            with redirect_stdout(out), redirect_stderr(err):
                code = create_account.main(list(argv))
        return code, out.getvalue(), err.getvalue()

    def test_creates_manager(self) -> None:
        code, out, _ = self._run(
            "Dana Reyes", "Dana@Acme.io", "5551234567", "a-strong-password", "manager"
        )
        self.assertEqual(code, 0)
        self.assertIn("manager", out)
        account = self.db.query(Account).filter(Account.email == "dana@acme.io").one()
        self.assertEqual(account.role, "manager")
        self.assertTrue(verify_password("a-strong-password", account.password_hash))

    def test_defaults_to_user_role(self) -> None:
        code, _, _ = self._run("Eli", "eli@acme.io", "5557654321", "a-strong-password")
        self.assertEqual(code, 0)
        account = self.db.query(Account).filter(Account.name == "Eli").one()
        self.assertEqual(account.role, "user")

    def test_duplicate_is_reported(self) -> None:
        self._run("Eli", "eli@acme.io", "5557654321", "a-strong-password")
        code, _, err = self._run("Eli", "eli@acme.io", "5550000000", "a-strong-password")
        self.assertEqual(code, 1)
        self.assertIn("Email already registered.", err)

    def test_invalid_input_is_reported(self) -> None:
        code, _, err = self._run("Eli", "eli@acme.io", "123", "a-strong-password")
        self.assertEqual(code, 1)
        self.assertIn("phone", err)


if __name__ == "__main__":
    unittest.main()
