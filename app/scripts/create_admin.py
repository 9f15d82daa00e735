"""
Create Admin Script
Creates an admin account in Supabase Auth, or promotes an existing account
to admin and resets its password.

Usage: python -m app.scripts.create_admin [email] [password] [name]
Requires SUPABASE_SERVICE_ROLE_KEY.
"""

import argparse
import sys
import logging

from supabase import Client

from app.config.permissions_config import ADMIN_ROLE
from app.database.supabase_client import get_service_supabase

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


USERS_PER_PAGE = 100


def find_user_by_email(supabase: Client, email: str, per_page: int = USERS_PER_PAGE):
    page = 1
    while True:
        users = supabase.auth.admin.list_users(page=page, per_page=per_page)
        for user in users:
            if (user.email or "").lower() == email.lower():
                return user
        if len(users) < per_page:
            return None
        page += 1


def ensure_admin(supabase: Client, email: str, password: str, name: str) -> str:
    """Create or promote the account. Returns 'created' or 'updated'."""
    existing = find_user_by_email(supabase, email)
    if existing:
        app_metadata = dict(existing.app_metadata or {})
        app_metadata["role"] = ADMIN_ROLE
        supabase.auth.admin.update_user_by_id(existing.id, {
            "password": password,
            "app_metadata": app_metadata
        })
        logger.info(f"Updated existing user to admin: {email}")
        return "updated"

    supabase.auth.admin.create_user({
        "email": email,
        "password": password,
        "email_confirm": True,
        "user_metadata": {"name": name},
        "app_metadata": {"role": ADMIN_ROLE}
    })
    logger.info(f"Created admin user: {email}")
    return "created"


def main(argv=None):
    parser = argparse.ArgumentParser(description="Create or promote an admin account")
    parser.add_argument("email", nargs="?", default="admin@example.com")
    parser.add_argument("password", nargs="?", default="admin123")
    parser.add_argument("name", nargs="?", default="Admin")
    args = parser.parse_args(argv)

    try:
        ensure_admin(get_service_supabase(), args.email, args.password, args.name)
        logger.info("Done. You can login with this email and password.")
    except Exception as e:
        logger.error(f"Error creating admin: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
