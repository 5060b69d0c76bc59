"""Unit tests for app.services.access_scope: read filters, mutation matrix, patch sanitizing."""

import unittest
from datetime import UTC, datetime

from app.core.errors import AuthorizationDenied, ValidationFailed
from app.models import Order
from app.services.access_scope import (
    FORBIDDEN_REASON,
    INVALID_ROLE_REASON,
    NOT_OWNER_REASON,
    NOT_PENDING_REASON,
    Mutation,
    QueryFilter,
    approval_stamp,
    can_mutate,
    content_patch,
    is_visible,
    require_role,
    scope_for,
    validate_status,
)


def _order(username: str = "alice", status: str = "pending", **kwargs: object) -> Order:
    """Build an unsaved Order for tests."""
    defaults = {
        "id": 1,
        "name": "Pen",
        "description": "Blue ballpoint pen",
        "price": 10.0,
        "quantity": 2,
    }
    defaults.update(kwargs)
    return Order(username=username, status=status, **defaults)


class TestScopeFor(unittest.TestCase):
    """Each role reads a fixed slice of the ledger."""

    def test_manager_sees_pending(self) -> None:
        self.assertEqual(scope_for("manager", "bob"), QueryFilter(status="pending"))

    def test_accountant_sees_approved(self) -> None:
        self.assertEqual(scope_for("accountant", "carol"), QueryFilter(status="approved"))

    def test_user_sees_own_orders(self) -> None:
        self.assertEqual(scope_for("user", "alice"), QueryFilter(username="alice"))

    def test_role_is_case_insensitive(self) -> None:
        self.assertEqual(scope_for(" Manager ", "bob"), QueryFilter(status="pending"))

    def test_unknown_role_is_denied(self) -> None:
        with self.assertRaises(AuthorizationDenied) as ctx:
            scope_for("admin", "root")
        self.assertEqual(ctx.exception.message, INVALID_ROLE_REASON)

    def test_is_visible_applies_filter_to_one_order(self) -> None:
        self.assertTrue(is_visible("user", _order(username="alice"), "alice"))
        self.assertFalse(is_visible("user", _order(username="alice"), "mallory"))
        self.assertFalse(is_visible("accountant", _order(status="pending"), "carol"))
        self.assertTrue(is_visible("manager", _order(status="pending"), "bob"))


class TestRequireRole(unittest.TestCase):
    """Role matrix: user creates/edits/deletes, manager sets status."""

    def test_matrix(self) -> None:
        expected = {
            ("user", Mutation.CREATE): True,
            ("user", Mutation.UPDATE_CONTENT): True,
            ("user", Mutation.DELETE): True,
            ("user", Mutation.UPDATE_STATUS): False,
            ("manager", Mutation.UPDATE_STATUS): True,
            ("manager", Mutation.CREATE): False,
            ("manager", Mutation.UPDATE_CONTENT): False,
            ("manager", Mutation.DELETE): False,
            ("accountant", Mutation.CREATE): False,
            ("accountant", Mutation.UPDATE_CONTENT): False,
            ("accountant", Mutation.UPDATE_STATUS): False,
            ("accountant", Mutation.DELETE): False,
        }
        for (role, mutation), allowed in expected.items():
            with self.subTest(role=role, mutation=mutation):
                self.assertEqual(require_role(role, mutation).allowed, allowed)

    def test_unknown_role_reports_invalid_role(self) -> None:
        decision = require_role("superuser", Mutation.CREATE)
        self.assertFalse(decision.allowed)
        self.assertEqual(decision.reason, INVALID_ROLE_REASON)

    def test_known_role_without_the_mutation_is_forbidden(self) -> None:
        for role, mutation in (
            ("accountant", Mutation.CREATE),
            ("accountant", Mutation.UPDATE_STATUS),
            ("accountant", Mutation.DELETE),
            ("manager", Mutation.DELETE),
            ("user", Mutation.UPDATE_STATUS),
        ):
            with self.subTest(role=role, mutation=mutation):
                self.assertEqual(require_role(role, mutation).reason, FORBIDDEN_REASON)

    def test_enforce_raises_on_denial(self) -> None:
        with self.assertRaises(AuthorizationDenied):
            require_role("accountant", Mutation.DELETE).enforce()
        require_role("user", Mutation.DELETE).enforce()


class TestCanMutateOwnership(unittest.TestCase):
    """Ownership compares the order's username with the caller's session name."""

    def test_owner_may_edit_and_delete(self) -> None:
        order = _order(username="alice")
        self.assertTrue(can_mutate("user", order, "alice", Mutation.UPDATE_CONTENT).allowed)
        self.assertTrue(can_mutate("user", order, "alice", Mutation.DELETE).allowed)

    def test_other_user_is_denied_with_reason(self) -> None:
        order = _order(username="alice")
        for mutation in (Mutation.UPDATE_CONTENT, Mutation.DELETE):
            decision = can_mutate("user", order, "bob", mutation)
            self.assertFalse(decision.allowed)
            self.assertEqual(decision.reason, NOT_OWNER_REASON)

    def test_ownership_follows_name_not_account_id(self) -> None:
        # Same name on the claim is enough; there is no account id on the order.
        order = _order(username="alice")
        self.assertTrue(can_mutate("user", order, "alice", Mutation.DELETE).allowed)
        self.assertFalse(can_mutate("user", order, "Alice", Mutation.DELETE).allowed)

    def test_content_edit_requires_pending(self) -> None:
        for status in ("approved", "rejected"):
            decision = can_mutate(
                "user", _order(status=status), "alice", Mutation.UPDATE_CONTENT
            )
            self.assertFalse(decision.allowed)
            self.assertEqual(decision.reason, NOT_PENDING_REASON)

    def test_owner_may_delete_decided_order(self) -> None:
        order = _order(status="rejected")
        self.assertTrue(can_mutate("user", order, "alice", Mutation.DELETE).allowed)

    def test_manager_status_change_ignores_ownership(self) -> None:
        order = _order(username="alice")
        self.assertTrue(can_mutate("manager", order, "bob", Mutation.UPDATE_STATUS).allowed)

    def test_create_needs_no_order(self) -> None:
        self.assertTrue(can_mutate("user", None, "alice", Mutation.CREATE).allowed)
        self.assertFalse(can_mutate("manager", None, "bob", Mutation.CREATE).allowed)

    def test_non_create_without_order_is_a_programming_error(self) -> None:
        with self.assertRaises(ValueError):
            can_mutate("user", None, "alice", Mutation.DELETE)


class TestContentPatch(unittest.TestCase):
    """Status, approval and owner fields never survive a content update."""

    def test_strips_protected_and_unknown_fields(self) -> None:
        payload = {
            "name": "Pencil",
            "quantity": 3,
            "status": "approved",
            "approved_by": "mallory",
            "approved_at": "2026-01-01T00:00:00Z",
            "username": "mallory",
            "id": 99,
        }
        self.assertEqual(content_patch(payload), {"name": "Pencil", "quantity": 3})

    def test_empty_payload(self) -> None:
        self.assertEqual(content_patch({}), {})


class TestStatusRules(unittest.TestCase):
    def test_validate_status_accepts_enum_values(self) -> None:
        for status in ("pending", "approved", "rejected"):
            self.assertEqual(validate_status(status), status)

    def test_validate_status_rejects_others(self) -> None:
        for status in ("APPROVED", "done", "", None):
            with self.subTest(status=status):
                with self.assertRaises(ValidationFailed):
                    validate_status(status)

    def test_decided_statuses_stamp_approver(self) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        for status in ("approved", "rejected"):
            stamp = approval_stamp(status, "bob", now)
            self.assertEqual(
                stamp, {"status": status, "approved_by": "bob", "approved_at": now}
            )

    def test_pending_clears_stamp(self) -> None:
        now = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
        self.assertEqual(
            approval_stamp("pending", "bob", now),
            {"status": "pending", "approved_by": None, "approved_at": None},
        )


if __name__ == "__main__":
    unittest.main()
