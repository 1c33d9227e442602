"""Utility script to create a user in the database."""

from __future__ import annotations

import argparse
from getpass import getpass

from sqlalchemy.exc import SQLAlchemyError

from app.application.use_cases.users import create_user
from app.domain.entities import UserRole
from app.infrastructure.database import SessionLocal, initialize_database


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a user for the Circulars API application.",
    )
    parser.add_argument(
        "--name",
        default="Administrator",
        help="Full name of the user (default: Administrator)",
    )
    parser.add_argument(
        "--email",
        default="admin@example.com",
        help="Email address of the user (default: admin@example.com)",
    )
    parser.add_argument(
        "--role",
        choices=[role.alias for role in UserRole],
        default=UserRole.MANAGEMENT.alias,
        help="Role of the user (default: management)",
    )
    parser.add_argument(
        "--password",
        default=None,
        help="Password of the user. Prompted interactively when omitted.",
    )
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()

    password = args.password or getpass("User password: ")
    if not password:
        raise SystemExit("No password was provided.")

    initialize_database()

    session = SessionLocal()
    try:
        user = create_user(
            session,
            name=args.name,
            role=args.role,
            email=args.email,
            password=password,
        )
    except ValueError as exc:
        session.rollback()
        raise SystemExit(f"Could not create the user: {exc}") from exc
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the user in the database: {exc}") from exc
    else:
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Email: {user.email}\n"
            f"  Role: {user.role.alias}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
