#!/usr/bin/env python3
"""
Reset a user's onboarding: delete their profile and financial snapshots and
clear every onboarding flag.

Usage (from repo root):
  python -m app.scripts.reset_onboarding --email someone@example.com
  python -m app.scripts.reset_onboarding --email someone@example.com --recompute-only
"""
import argparse
import sys
from typing import List, Optional

from app.core.database import SessionLocal
from app.core.exceptions import NotFoundError
from app.services.onboarding_service import OnboardingService
from app.services.user_service import UserService


def reset_onboarding(email: str, recompute_only: bool = False, session_factory=SessionLocal) -> int:
    db = session_factory()
    try:
        user = UserService(db).get_user_by_email(email)
        if user is None:
            print(f"❌ User {email} not found")
            return 1

        service = OnboardingService(db)
        if recompute_only:
            service.recompute(user.id)
            print(f"🔁 Recomputed onboarding flags for {email}")
        else:
            counts = service.reset(user.id)
            print(
                f"🗑️ Deleted {counts['profiles_deleted']} profile(s) and "
                f"{counts['financial_records_deleted']} financial record(s) for {email}"
            )

        for key, value in service.get_status(user.id).items():
            print(f"   {key}: {value}")
        return 0
    except NotFoundError as e:
        print(f"❌ {e.message}")
        return 1
    finally:
        db.close()


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Reset a user's onboarding progress")
    parser.add_argument("--email", required=True, help="Email of the user to reset")
    parser.add_argument(
        "--recompute-only",
        action="store_true",
        help="Only re-derive the flags from stored data; delete nothing",
    )
    args = parser.parse_args(argv)
    return reset_onboarding(args.email, recompute_only=args.recompute_only)


if __name__ == "__main__":
    sys.exit(main())
