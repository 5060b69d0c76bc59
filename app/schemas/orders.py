"""Pydantic schemas for the order ledger endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

OrderStatus = Literal["pending", "approved", "rejected"]

ORDER_STATUS_VALUES: frozenset[str] = frozenset({"pending", "approved", "rejected"})

NAME_MIN_LEN = 3
NAME_MAX_LEN = 50
DESCRIPTION_MIN_LEN = 6
DESCRIPTION_MAX_LEN = 200


class OrderCreate(BaseModel):
    """New order from a submitter. Any username sent is ignored."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(..., min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN)
    description: str = Field(
        ..., min_length=DESCRIPTION_MIN_LEN, max_length=DESCRIPTION_MAX_LEN
    )
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    quantity: int = Field(..., ge=1, description="Number of units")
    username: str | None = Field(
        default=None,
        description="Accepted for compatibility; the owner is always the caller.",
    )


class OrderContentUpdate(BaseModel):
    """Partial content edit. Status and approval fields are never applied."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str | None = Field(
        default=None, min_length=NAME_MIN_LEN, max_length=NAME_MAX_LEN
    )
    description: str | None = Field(
        default=None, min_length=DESCRIPTION_MIN_LEN, max_length=DESCRIPTION_MAX_LEN
    )
    price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    quantity: int | None = Field(default=None, ge=1)


class OrderStatusUpdate(BaseModel):
    """Approver decision. Validity of the value is checked by the access scope."""

    status: str = Field(..., description="pending, approved or rejected")


class OrderRead(BaseModel):
    """Order as returned to clients."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    name: str
    description: str
    price: float
    quantity: int
    status: OrderStatus
    approved_by: str | None = None
    approved_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class OrderResponse(BaseModel):
    order: OrderRead


class Pagination(BaseModel):
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    limit: int = Field(..., ge=1, le=100)
    pages: int = Field(..., ge=0)


class OrderListResponse(BaseModel):
    """One page of the orders visible to the caller's role."""

    orders: list[OrderRead]
    pagination: Pagination
