"""
Create an admin user (e.g. the first master admin). Run from project root:
  python -m app.scripts.create_admin EMAIL PASSWORD FIRST_NAME LAST_NAME [--role ROLE]
Example:
  python -m app.scripts.create_admin root@example.com your-secure-password Ada Lovelace --role master_admin
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from app.core.database import session_scope
from app.core.errors import ConflictError
from app.core.roles import ADMIN_ROLE_IDS, UserRole, UserStatus
from app.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN
from app.schemas.users import AdminCreate
from app.services.users import create_admin

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)

ROLE_CHOICES = {UserRole(r).name.lower(): UserRole(r) for r in ADMIN_ROLE_IDS}


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create an active admin user with a password.")
    parser.add_argument("email", help="Admin email (must be unused)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("first_name", help="First name (2-50 chars)")
    parser.add_argument("last_name", help="Last name (2-50 chars)")
    parser.add_argument("--role", default="admin", choices=sorted(ROLE_CHOICES))
    args = parser.parse_args(argv)

    role = ROLE_CHOICES[args.role]
    try:
        body = AdminCreate(
            email=args.email.strip(),
            first_name=args.first_name.strip(),
            last_name=args.last_name.strip(),
            status=int(UserStatus.ACTIVE),
            role_id=int(role),
            password=args.password,
        )
    except ValidationError as e:
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"])
            print(f"{field}: {error['msg']}", file=sys.stderr)
        return 1

    data = body.model_dump(exclude={"role_id", "password"}, exclude_none=True)
    with session_scope() as db:
        try:
            admin = create_admin(db, data, role_id=role, password=body.password)
        except ConflictError as e:
            print(e.message, file=sys.stderr)
            return 1
    logger.info("Created admin id=%s email=%s role=%s", admin["id"], body.email, args.role)
    return 0


if __name__ == "__main__":
    sys.exit(main())
