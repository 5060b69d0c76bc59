"""Registration, credential login and session inspection."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.api.deps import CurrentClaim
from app.core.database import get_db
from app.schemas.auth import (
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    SessionClaim,
    TokenResponse,
)
from app.services import session_codec
from app.services.authenticator import authenticate, register_account

router = APIRouter()


@router.post(
    "/register",
    response_model=MessageResponse,
    status_code=status.HTTP_201_CREATED,
)
def register(
    body: RegisterRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """
    Create an account with role user, manager or accountant.
    Email, phone and name must each be unused; the password is never returned.
    """
    register_account(db, body)
    return MessageResponse(message="User registered successfully.")


@router.post("/login", response_model=TokenResponse)
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
) -> TokenResponse:
    """
    Authenticate with email, password and the role to sign in as; returns a JWT.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    claim = authenticate(db, body.email, body.password, body.role)
    return TokenResponse(access_token=session_codec.issue(claim), token_type="bearer")


@router.get("/session", response_model=SessionClaim)
def read_session(claim: CurrentClaim) -> SessionClaim:
    """Return the claim carried by the caller's token."""
    return claim
