"""Order endpoints. Each route resolves the session, checks scope, then runs
exactly one ledger operation."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.orm import Session

from app.api.deps import CurrentClaim
from app.core.database import get_db
from app.core.errors import NotFound
from app.schemas.auth import MessageResponse
from app.schemas.orders import (
    OrderContentUpdate,
    OrderCreate,
    OrderListResponse,
    OrderRead,
    OrderResponse,
    OrderStatusUpdate,
    Pagination,
)
from app.services import order_ledger
from app.services.access_scope import (
    Mutation,
    can_mutate,
    content_patch,
    is_visible,
    require_role,
    scope_for,
    validate_status,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Orders.id is a 32-bit Integer column; larger ids are rejected as 422.
MAX_ORDER_ID = 2**31 - 1

OrderId = Annotated[int, Path(ge=1, le=MAX_ORDER_ID)]


@router.get("", response_model=OrderListResponse)
def list_orders(
    claim: CurrentClaim,
    db: Annotated[Session, Depends(get_db)],
    page: Annotated[int, Query(description="Page number, clamped to >= 1")] = 1,
    limit: Annotated[int, Query(description="Page size, clamped to 1..100")] = 10,
) -> OrderListResponse:
    """
    List the orders visible to the caller's role, newest first.

    manager: pending orders; accountant: approved orders; user: own orders.
    """
    query_filter = scope_for(claim.role, claim.name)
    result = order_ledger.list_orders(db, query_filter, page=page, limit=limit)
    return OrderListResponse(
        orders=[OrderRead.model_validate(o) for o in result.orders],
        pagination=Pagination(
            total=result.total,
            page=result.page,
            limit=result.limit,
            pages=result.pages,
        ),
    )


@router.get("/{order_id}", response_model=OrderResponse)
def get_order(
    order_id: OrderId,
    claim: CurrentClaim,
    db: Annotated[Session, Depends(get_db)],
) -> OrderResponse:
    """
    Return one order if it is inside the caller's read scope.

    Orders outside the scope are reported as missing, the same as an unknown id.
    """
    order = order_ledger.get_order(db, order_id)
    if not is_visible(claim.role, order, claim.name):
        raise NotFound(order_ledger.ORDER_NOT_FOUND)
    return OrderResponse(order=OrderRead.model_validate(order))


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
def create_order(
    body: OrderCreate,
    claim: CurrentClaim,
    db: Annotated[Session, Depends(get_db)],
) -> OrderResponse:
    """Create a pending order (user only). The owner is always the caller."""
    can_mutate(claim.role, None, claim.name, Mutation.CREATE).enforce()
    if body.username and body.username != claim.name:
        logger.info("Ignoring supplied owner on create (caller_id=%s)", claim.id)
    order = order_ledger.create_order(db, claim.name, body)
    return OrderResponse(order=OrderRead.model_validate(order))


@router.put("/{order_id}", response_model=OrderResponse)
def update_order(
    order_id: OrderId,
    body: OrderContentUpdate,
    claim: CurrentClaim,
    db: Annotated[Session, Depends(get_db)],
) -> OrderResponse:
    """
    Edit name, description, price or quantity of the caller's own pending order.
    status, approved_by and approved_at are dropped from the payload.
    """
    require_role(claim.role, Mutation.UPDATE_CONTENT).enforce()
    patch = content_patch(body.model_dump(exclude_none=True))
    order = order_ledger.get_order(db, order_id)
    can_mutate(claim.role, order, claim.name, Mutation.UPDATE_CONTENT).enforce()
    order = order_ledger.update_order_content(db, order, patch)
    return OrderResponse(order=OrderRead.model_validate(order))


@router.patch("/{order_id}", response_model=OrderResponse)
def update_order_status(
    order_id: OrderId,
    body: OrderStatusUpdate,
    claim: CurrentClaim,
    db: Annotated[Session, Depends(get_db)],
) -> OrderResponse:
    """
    Approve, reject or reopen an order (manager only).

    approved/rejected record the manager's name and the time; pending clears them.
    """
    require_role(claim.role, Mutation.UPDATE_STATUS).enforce()
    new_status = validate_status(body.status)
    order = order_ledger.get_order(db, order_id)
    can_mutate(claim.role, order, claim.name, Mutation.UPDATE_STATUS).enforce()
    order = order_ledger.set_order_status(db, order, new_status, claim.name)
    return OrderResponse(order=OrderRead.model_validate(order))


@router.delete("/{order_id}", response_model=MessageResponse)
def delete_order(
    order_id: OrderId,
    claim: CurrentClaim,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Delete the caller's own order (user only)."""
    require_role(claim.role, Mutation.DELETE).enforce()
    order = order_ledger.get_order(db, order_id)
    can_mutate(claim.role, order, claim.name, Mutation.DELETE).enforce()
    order_ledger.delete_order(db, order)
    return MessageResponse(message="Order deleted")
