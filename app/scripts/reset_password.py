#!/usr/bin/env python3
"""
Set a new password for a user.

Usage (from repo root):
  python -m app.scripts.reset_password --email someone@example.com --password 'newpass123'
"""
import argparse
import sys
from typing import List, Optional

from app.core.database import SessionLocal
from app.services.user_service import UserService

MIN_PASSWORD_LENGTH = 6


def reset_password(email: str, new_password: str, session_factory=SessionLocal) -> int:
    if len(new_password) < MIN_PASSWORD_LENGTH:
        print(f"❌ Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return 1

    db = session_factory()
    try:
        user_service = UserService(db)
        user = user_service.get_user_by_email(email)
        if user is None:
            print(f"❌ User {email} not found")
            return 1
        user_service.update_user_password(user, new_password)
        print(f"✅ Password updated for {user.email}")
        return 0
    finally:
        db.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Reset a user's password")
    parser.add_argument("--email", required=True, help="Email of the user")
    parser.add_argument("--password", required=True, help="New password (min 6 characters)")
    args = parser.parse_args(argv)
    return reset_password(args.email, args.password)


if __name__ == "__main__":
    sys.exit(main())
