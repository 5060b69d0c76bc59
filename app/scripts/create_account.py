"""
Create an account without going through the API (e.g. the first manager). Run from project root:
  python -m app.scripts.create_account NAME EMAIL PHONE PASSWORD [role]
Example:
  python -m app.scripts.create_account "Dana Reyes" dana@example.com 5551234567 a-strong-password manager
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.database import SessionLocal
from app.core.errors import Conflict
from app.core.logging_config import configure_logging
from app.schemas.auth import ROLE_VALUES, RegisterRequest
from app.services.authenticator import register_account

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an order-approvals account.")
    parser.add_argument("name", help="Display name (unique; owns orders)")
    parser.add_argument("email", help="Email address (unique)")
    parser.add_argument("phone", help="Phone number, 10-15 digits (unique)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument("role", nargs="?", default="user", choices=sorted(ROLE_VALUES))
    args = parser.parse_args(argv)

    configure_logging()
    try:
        body = RegisterRequest(
            name=args.name,
            email=args.email,
            phone=args.phone,
            password=args.password,
            role=args.role,
        )
    except ValidationError as e:
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"])
            print(f"{field}: {err['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        account = register_account(db, body)
    except Conflict as e:
        print(e.message, file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("Account creation failed: %s", e)
        return 1
    finally:
        db.close()
    print(f"Created account '{account.name}' ({account.email}) with role '{account.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
