"""Session codec: encode a SessionClaim into a signed JWT and resolve it back.

Stateless. resolve() trusts the signed claim and never reads the credential
store, so a role changed directly in the store only takes effect once the
account signs in again; the staleness window is JWT_EXPIRE_MINUTES.
"""

import logging

import jwt
from pydantic import ValidationError

from app.core.errors import AuthenticationFailed
from app.core.security import create_access_token, decode_access_token
from app.schemas.auth import SessionClaim

logger = logging.getLogger(__name__)

UNAUTHENTICATED_MESSAGE = "Not authenticated"


class Unauthenticated(AuthenticationFailed):
    """Missing, malformed, expired or tampered session token."""

    def __init__(self, message: str = UNAUTHENTICATED_MESSAGE) -> None:
        super().__init__(message)


def issue(claim: SessionClaim) -> str:
    """Return a signed token carrying the claim and a fixed expiry."""
    return create_access_token(
        sub=claim.id,
        claims={"name": claim.name, "email": claim.email, "role": claim.role},
    )


def resolve(token: str | None) -> SessionClaim:
    """
    Rebuild the claim from a token or raise Unauthenticated.

    Fails closed: a token missing any claim field, or carrying an unknown role,
    is rejected as a whole.
    """
    if not token or not token.strip():
        raise Unauthenticated()
    try:
        payload = decode_access_token(token.strip())
    except jwt.PyJWTError as e:
        logger.debug("Rejected session token: %s", type(e).__name__)
        raise Unauthenticated() from e
    try:
        return SessionClaim(
            id=int(payload["sub"]),
            name=payload["name"],
            email=payload["email"],
            role=payload["role"],
        )
    except (KeyError, TypeError, ValueError, ValidationError) as e:
        logger.debug("Rejected session token with incomplete claim")
        raise Unauthenticated() from e
