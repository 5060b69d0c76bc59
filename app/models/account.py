"""ORM model for registered accounts (credential store)."""

from sqlalchemy import Column, DateTime, Integer, String, func

from app.models.base import Base


class Account(Base):
    """
    Account used for credential login and role-based access.

    role: 'user', 'manager' or 'accountant'; fixed at registration.
    name is unique because orders reference their owner by name.
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    phone = Column(String(15), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default="user")
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    def __repr__(self) -> str:
        return f"<Account id={self.id} email={self.email!r} role={self.role!r}>"
