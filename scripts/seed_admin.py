"""
Create the first SYSTEM_ADMIN account so the API can be used at all.

Usage:
  python -m scripts.seed_admin --username admin --email admin@local.test --password secret123
"""
import argparse

from review_system.core.security import hash_password
from review_system.db.session import SessionLocal
from review_system.models.user import Role, User


def main():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("--username", default="admin")
    parser.add_argument("--email", default="admin@local.test")
    parser.add_argument("--password", required=True)
    parser.add_argument("--first-name", default="System")
    parser.add_argument("--last-name", default="Admin")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.username == args.username).one_or_none()
        if existing:
            print("User already exists:", existing.username, existing.role)
            return
        db.add(
            User(
                username=args.username,
                email=args.email,
                password_hash=hash_password(args.password),
                first_name=args.first_name,
                last_name=args.last_name,
                role=Role.SYSTEM_ADMIN.value,
                active=True,
            )
        )
        db.commit()
        print("Seeded SYSTEM_ADMIN:", args.username)
    finally:
        db.close()

if __name__ == "__main__":
    main()
