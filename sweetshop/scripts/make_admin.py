"""
Promote an existing user to admin. Run from project root:
  python -m sweetshop.scripts.make_admin EMAIL_OR_USERNAME

The change applies on the user's next request; existing tokens stay valid
because the role is read from the database on every request.
"""
import argparse
import logging
import sys

from sweetshop.core.database import SessionLocal
from sweetshop.core.errors import SweetShopError
from sweetshop.core.security import ROLE_ADMIN, ROLES
from sweetshop.services.identity import set_role

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Change a Sweet Shop user's role.")
    parser.add_argument("identifier", help="Email or username of the user")
    parser.add_argument("--role", default=ROLE_ADMIN, choices=list(ROLES))
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = set_role(db, args.identifier, args.role)
    except SweetShopError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"User '{user.username}' ({user.email}) now has role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
