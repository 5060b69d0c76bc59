"""Request dependencies: resolve the bearer token into a session claim."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.schemas.auth import SessionClaim
from app.services import session_codec

security = HTTPBearer(auto_error=False)


def get_current_claim(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> SessionClaim:
    """Dependency: require a valid Bearer token and return its claim. Raises 401 otherwise."""
    if credentials is None:
        raise session_codec.Unauthenticated()
    return session_codec.resolve(credentials.credentials)


CurrentClaim = Annotated[SessionClaim, Depends(get_current_claim)]
