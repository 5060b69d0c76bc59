"""Order ledger: persistence and lifecycle writes for orders.

Callers are expected to have passed the access scope checks already; the
ledger itself only distinguishes found from not found. Updates are
last-write-wins: there is no version column and no row locking.
"""

import logging
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.models import Order
from app.schemas.orders import OrderCreate
from app.services.access_scope import QueryFilter, approval_stamp

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100
# Keeps OFFSET inside a signed 64-bit integer.
MAX_PAGE = (2**63 - 1) // MAX_LIMIT

ORDER_NOT_FOUND = "Order not found"


@dataclass
class OrderPage:
    """One page of orders plus the totals needed for pagination."""

    orders: list[Order]
    total: int
    page: int
    limit: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.total else 0


def clamp_pagination(page: int | None, limit: int | None) -> tuple[int, int]:
    """Clamp page to [1, MAX_PAGE] and limit to [1, MAX_LIMIT]; None means the default."""
    page = DEFAULT_PAGE if page is None else page
    limit = DEFAULT_LIMIT if limit is None else limit
    return min(max(page, 1), MAX_PAGE), min(max(limit, 1), MAX_LIMIT)


def create_order(db: Session, owner: str, body: OrderCreate) -> Order:
    """Persist a new pending order owned by owner, whatever body.username says."""
    order = Order(
        username=owner,
        name=body.name,
        description=body.description,
        price=float(body.price),
        quantity=int(body.quantity),
        status="pending",
        approved_by=None,
        approved_at=None,
    )
    db.add(order)
    db.commit()
    db.refresh(order)
    logger.info("Order created: id=%s owner=%s", order.id, owner)
    return order


def list_orders(
    db: Session,
    query_filter: QueryFilter,
    page: int | None = DEFAULT_PAGE,
    limit: int | None = DEFAULT_LIMIT,
) -> OrderPage:
    """Return one page of orders matching the filter, newest first."""
    page, limit = clamp_pagination(page, limit)
    query = query_filter.apply(db.query(Order))
    total = query.count()
    orders = (
        query.order_by(Order.created_at.desc(), Order.id.desc())
        .offset((page - 1) * limit)
        .limit(limit)
        .all()
    )
    return OrderPage(orders=orders, total=total, page=page, limit=limit)


def get_order(db: Session, order_id: int) -> Order:
    """Return the order or raise NotFound."""
    order = db.get(Order, order_id)
    if order is None:
        raise NotFound(ORDER_NOT_FOUND)
    return order


def update_order_content(db: Session, order: Order, patch: dict[str, Any]) -> Order:
    """Apply an already-sanitized content patch to a loaded order."""
    for field, value in patch.items():
        setattr(order, field, value)
    if patch:
        db.commit()
        db.refresh(order)
        logger.info("Order updated: id=%s fields=%s", order.id, sorted(patch))
    return order


def set_order_status(db: Session, order: Order, status: str, approver: str) -> Order:
    """Move an order to status, stamping or clearing the approver fields."""
    for field, value in approval_stamp(status, approver, datetime.now(UTC)).items():
        setattr(order, field, value)
    db.commit()
    db.refresh(order)
    logger.info("Order status set: id=%s status=%s by=%s", order.id, status, approver)
    return order


def delete_order(db: Session, order: Order) -> None:
    """Remove a loaded order."""
    order_id = order.id
    db.delete(order)
    db.commit()
    logger.info("Order deleted: id=%s", order_id)
