"""Pydantic request/response schemas."""

from app.schemas.auth import (
    ROLE_VALUES,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    RoleName,
    SessionClaim,
    TokenResponse,
)
from app.schemas.health import HealthResponse
from app.schemas.orders import (
    ORDER_STATUS_VALUES,
    OrderContentUpdate,
    OrderCreate,
    OrderListResponse,
    OrderRead,
    OrderResponse,
    OrderStatus,
    OrderStatusUpdate,
    Pagination,
)

__all__ = [
    "HealthResponse",
    "LoginRequest",
    "MessageResponse",
    "ORDER_STATUS_VALUES",
    "OrderContentUpdate",
    "OrderCreate",
    "OrderListResponse",
    "OrderRead",
    "OrderResponse",
    "OrderStatus",
    "OrderStatusUpdate",
    "Pagination",
    "ROLE_VALUES",
    "RegisterRequest",
    "RoleName",
    "SessionClaim",
    "TokenResponse",
]
