"""
Create a user (e.g. the first admin; registration always creates plain users).
Run from project root:
  python -m app.scripts.create_user USERNAME EMAIL PASSWORD FIRST_NAME LAST_NAME [role]
Example:
  python -m app.scripts.create_user admin admin@example.com your-secure-password Ada Lovelace admin
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import Conflict, ValidationFailed
from app.core.validation import run_validation
from app.schemas.auth import RegisterRequest
from app.services.users import create_user

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an Inkpost user.")
    parser.add_argument("username", help="Username (3-30 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("first_name", help="First name")
    parser.add_argument("last_name", help="Last name")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    args = parser.parse_args(argv)

    try:
        body = run_validation(
            RegisterRequest,
            {
                "username": args.username,
                "email": args.email,
                "password": args.password,
                "first_name": args.first_name,
                "last_name": args.last_name,
            },
        )
    except ValidationFailed as e:
        for err in e.errors:
            print(f"{err.field}: {err.message}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, body, role=args.role)
    except Conflict as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
