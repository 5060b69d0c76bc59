"""SQLAlchemy ORM models."""

from app.models.account import Account
from app.models.base import Base
from app.models.order import Order

__all__ = ["Account", "Base", "Order"]
