"""Access scope: the read filter and the permitted mutations for a role.

Deterministic and store-free. Routes call require_role() before touching the
ledger and can_mutate() once the target order has been loaded.

Ownership is matched on the order's username against the caller's session
name, not the account id. Account names are unique in the credential store,
which is what keeps this comparison sound.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from sqlalchemy.orm import Query

from app.core.errors import AuthorizationDenied, ValidationFailed
from app.models import Order
from app.schemas.auth import ROLE_VALUES
from app.schemas.orders import ORDER_STATUS_VALUES

# Fields an owner may change through the content path.
CONTENT_FIELDS: frozenset[str] = frozenset({"name", "description", "price", "quantity"})

# Never applied from a content update, even on the owner's own order.
PROTECTED_FIELDS: frozenset[str] = frozenset(
    {"status", "approved_by", "approved_at", "username"}
)

# Statuses that carry an approver stamp.
DECIDED_STATUSES: frozenset[str] = frozenset({"approved", "rejected"})

INVALID_ROLE_REASON = "Invalid role"
FORBIDDEN_REASON = "Forbidden"
NOT_OWNER_REASON = "Forbidden: not your order"
NOT_PENDING_REASON = "Forbidden: only pending orders can be edited"


class Mutation(str, Enum):
    """Ledger writes subject to role and ownership checks."""

    CREATE = "create"
    UPDATE_CONTENT = "update_content"
    UPDATE_STATUS = "update_status"
    DELETE = "delete"


# Role allowed to perform each mutation.
MUTATION_ROLES: dict[Mutation, str] = {
    Mutation.CREATE: "user",
    Mutation.UPDATE_CONTENT: "user",
    Mutation.UPDATE_STATUS: "manager",
    Mutation.DELETE: "user",
}

# Mutations that require the caller to own the order.
OWNER_ONLY: frozenset[Mutation] = frozenset({Mutation.UPDATE_CONTENT, Mutation.DELETE})


@dataclass(frozen=True)
class QueryFilter:
    """Read predicate for the ledger; unset fields do not constrain."""

    status: str | None = None
    username: str | None = None

    def apply(self, query: Query) -> Query:
        if self.status is not None:
            query = query.filter(Order.status == self.status)
        if self.username is not None:
            query = query.filter(Order.username == self.username)
        return query

    def matches(self, order: Order) -> bool:
        if self.status is not None and order.status != self.status:
            return False
        if self.username is not None and order.username != self.username:
            return False
        return True


@dataclass(frozen=True)
class Decision:
    """Outcome of a mutation check; reason is set only on denial."""

    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(allowed=False, reason=reason)

    def enforce(self) -> None:
        """Raise AuthorizationDenied when the decision is a denial."""
        if not self.allowed:
            raise AuthorizationDenied(self.reason or FORBIDDEN_REASON)


def _normalize_role(role: str | None) -> str:
    return (role or "").strip().lower()


def scope_for(role: str, username: str) -> QueryFilter:
    """
    Return the orders a role may read.

    manager sees pending orders, accountant sees approved orders, user sees
    their own. Any other role is denied as an invalid role.
    """
    normalized = _normalize_role(role)
    if normalized == "manager":
        return QueryFilter(status="pending")
    if normalized == "accountant":
        return QueryFilter(status="approved")
    if normalized == "user":
        return QueryFilter(username=(username or "").strip())
    raise AuthorizationDenied(INVALID_ROLE_REASON)


def is_visible(role: str, order: Order, username: str) -> bool:
    """True if a single order falls inside the role's read scope."""
    return scope_for(role, username).matches(order)


def require_role(role: str, mutation: Mutation) -> Decision:
    """Role half of a mutation check; needs no order and no store access."""
    normalized = _normalize_role(role)
    if normalized not in ROLE_VALUES:
        return Decision.deny(INVALID_ROLE_REASON)
    if MUTATION_ROLES[mutation] != normalized:
        return Decision.deny(FORBIDDEN_REASON)
    return Decision.allow()


def can_mutate(
    role: str,
    order: Order | None,
    username: str,
    mutation: Mutation,
) -> Decision:
    """
    Full mutation check: role, then ownership, then lifecycle.

    order may be None only for CREATE. Content edits are limited to orders
    that are still pending.
    """
    decision = require_role(role, mutation)
    if not decision.allowed or mutation == Mutation.CREATE:
        return decision
    if order is None:
        raise ValueError(f"{mutation.value} requires the target order")
    if mutation in OWNER_ONLY and order.username != (username or "").strip():
        return Decision.deny(NOT_OWNER_REASON)
    if mutation == Mutation.UPDATE_CONTENT and order.status != "pending":
        return Decision.deny(NOT_PENDING_REASON)
    return Decision.allow()


def content_patch(payload: dict[str, Any]) -> dict[str, Any]:
    """Drop protected and unknown fields from a content update payload."""
    return {
        key: value
        for key, value in payload.items()
        if key in CONTENT_FIELDS and key not in PROTECTED_FIELDS
    }


def validate_status(status: str | None) -> str:
    """Return the canonical status or raise ValidationFailed."""
    if not isinstance(status, str) or status not in ORDER_STATUS_VALUES:
        raise ValidationFailed("Invalid status")
    return status


def approval_stamp(status: str, approver: str, now: datetime) -> dict[str, Any]:
    """
    Fields written with a status change.

    approved and rejected record who decided and when; pending clears both so
    an order never carries a stale decision.
    """
    if status in DECIDED_STATUSES:
        return {"status": status, "approved_by": approver, "approved_at": now}
    return {"status": status, "approved_by": None, "approved_at": None}
