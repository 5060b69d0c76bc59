"""Authenticator and account registration against the credential store."""

import logging

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import AuthenticationFailed, Conflict, ValidationFailed
from app.core.security import dummy_password_hash, hash_password, verify_password
from app.models import Account
from app.schemas.auth import (
    RegisterRequest,
    SessionClaim,
    normalize_email,
    normalize_role,
)

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials."
MISSING_FIELDS = "All fields are required."
INVALID_EMAIL = "Invalid email format."


def _is_valid_email(email: str) -> bool:
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def authenticate(
    db: Session,
    email: str | None,
    password: str | None,
    claimed_role: str | None,
) -> SessionClaim:
    """
    Verify (email, password, claimed role) and return the session claim.

    Raises ValidationFailed for missing fields or a malformed email, and one
    generic AuthenticationFailed for every other failure: unknown account,
    wrong password, unknown role or a role the account does not hold.
    Exactly one bcrypt comparison runs per attempt, against the stored hash or
    a dummy hash, so a missing account costs the same as a wrong password.
    """
    if not email or not password or not claimed_role:
        raise ValidationFailed(MISSING_FIELDS)
    normalized_email = normalize_email(email)
    normalized_role = normalize_role(claimed_role)
    if not normalized_email or not normalized_role:
        raise ValidationFailed(MISSING_FIELDS)
    if not _is_valid_email(normalized_email):
        raise ValidationFailed(INVALID_EMAIL)

    account = db.query(Account).filter(Account.email == normalized_email).first()
    stored_hash = account.password_hash if account is not None else dummy_password_hash()
    password_ok = verify_password(password, stored_hash)

    if account is None or not password_ok:
        logger.info("Login rejected: credential mismatch")
        raise AuthenticationFailed(INVALID_CREDENTIALS)
    if (account.role or "").lower() != normalized_role:
        logger.info("Login rejected: credential mismatch (account_id=%s)", account.id)
        raise AuthenticationFailed(INVALID_CREDENTIALS)

    logger.info("Login succeeded: account_id=%s role=%s", account.id, account.role)
    return SessionClaim(
        id=account.id,
        name=account.name,
        email=account.email,
        role=account.role.lower(),
    )


def register_account(db: Session, body: RegisterRequest) -> Account:
    """
    Create an account from a validated registration request.

    Raises Conflict when the email, phone or name is already registered.
    """
    if db.query(Account).filter(Account.email == body.email).first() is not None:
        raise Conflict("Email already registered.")
    if db.query(Account).filter(Account.phone == body.phone).first() is not None:
        raise Conflict("Phone number already registered.")
    if db.query(Account).filter(Account.name == body.name).first() is not None:
        raise Conflict("Name already registered.")

    account = Account(
        name=body.name,
        email=body.email,
        phone=body.phone,
        password_hash=hash_password(body.password),
        role=body.role,
    )
    db.add(account)
    try:
        db.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent registration of the same identity.
        db.rollback()
        logger.info("Registration conflict at commit: %s", type(e.orig).__name__)
        raise Conflict("Account already registered.") from e
    db.refresh(account)
    logger.info("Registered account_id=%s role=%s", account.id, account.role)
    return account
