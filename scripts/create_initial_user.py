"""Create the first administrator account."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from cyberhunter.application.use_cases.admin import create_admin
from cyberhunter.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Create an administrator for the CyberHunter API.",
    )
    parser.add_argument("--name", default="Administrator", help="Display name of the admin")
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Login email (default: admin@example.com)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password; prompted for interactively when omitted.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    password = args.password or getpass("Admin password: ")
    if not password:
        raise SystemExit("A password is required.")

    initialize_database()

    session = SessionLocal()
    try:
        user = create_admin(session, name=args.name, email=args.email, password=password)
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the admin: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Database error while saving the admin: {exc}") from exc
    else:
        print(f"Admin created:\n  ID: {user.id}\n  Name: {user.name}\n  Email: {user.email}")
    finally:
        session.close()


if __name__ == "__main__":
    main()
