"""
Create a user (e.g. the first admin). Run from project root:
  python -m sweetshop.scripts.create_user USERNAME EMAIL PASSWORD [role]
Example:
  python -m sweetshop.scripts.create_user admin admin@example.com your-secure-password admin
"""
import argparse
import sys

from sweetshop.core.database import SessionLocal
from sweetshop.core.errors import SweetShopError
from sweetshop.core.security import ROLES, ROLE_USER
from sweetshop.services.identity import register_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Sweet Shop user.")
    parser.add_argument("username", help="Username (3-255 chars)")
    parser.add_argument("email", help="Email address")
    parser.add_argument("password", help="Password (6-128 chars)")
    parser.add_argument("role", nargs="?", default=ROLE_USER, choices=list(ROLES))
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = register_user(db, args.username, args.email, args.password, role=args.role)
    except SweetShopError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()
    print(f"Created user '{user.username}' ({user.email}) with role '{user.role}'.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
