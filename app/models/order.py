"""ORM model for the order ledger."""

from sqlalchemy import CheckConstraint, Column, DateTime, Float, Integer, String, func

from app.models.base import Base


class Order(Base):
    """
    Purchase order submitted by a 'user' account and decided by a 'manager'.

    username holds the owner's display name and never changes after creation.
    approved_by/approved_at are set together on approval or rejection and
    cleared together when the order goes back to pending.
    """

    __tablename__ = "orders"
    __table_args__ = (
        CheckConstraint("price >= 0", name="price_non_negative"),
        CheckConstraint("quantity >= 1", name="quantity_positive"),
        CheckConstraint(
            "status IN ('pending', 'approved', 'rejected')",
            name="status_valid",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, index=True)
    name = Column(String(50), nullable=False)
    description = Column(String(200), nullable=False)
    price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default="pending", index=True)
    approved_by = Column(String(255), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
