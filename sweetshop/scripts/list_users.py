"""
List registered users with their roles. Run from project root:
  python -m sweetshop.scripts.list_users
"""
import sys

from sweetshop.core.database import SessionLocal
from sweetshop.services.identity import list_users


def main() -> int:
    db = SessionLocal()
    try:
        users = list_users(db)
    finally:
        db.close()

    if not users:
        print("No users found. Create one with: python -m sweetshop.scripts.create_user")
        return 0
    print(f"Found {len(users)} user(s):")
    for index, user in enumerate(users, start=1):
        created = user.created_at.isoformat() if user.created_at else "-"
        print(f"{index}. {user.username} <{user.email}> role={user.role} created={created}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
