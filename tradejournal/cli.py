"""CLI tool for admin operations.

Usage:
    python -m tradejournal.cli create-user
"""

import getpass
import logging
import sys

from sqlmodel import Session, select

from tradejournal.database import engine, create_db_and_tables
from tradejournal.models.user import User
from tradejournal.services.auth import hash_password
from tradejournal.utils.logging import setup_logging

logger = logging.getLogger(__name__)


def create_user():
    """Create a journal user with a password login."""
    create_db_and_tables()

    username = input("Username: ").strip()
    if not username:
        print("Username cannot be empty.")
        sys.exit(1)

    with Session(engine) as session:
        existing = session.exec(select(User).where(User.username == username)).first()
        if existing:
            print(f"User '{username}' already exists.")
            sys.exit(1)

    password = getpass.getpass("Password: ")
    password_confirm = getpass.getpass("Confirm password: ")
    if password != password_confirm:
        print("Passwords do not match.")
        sys.exit(1)
    if not password:
        print("Password cannot be empty.")
        sys.exit(1)

    user = User(username=username, hashed_password=hash_password(password))
    with Session(engine) as session:
        session.add(user)
        session.commit()

    logger.info(f"Created user '{username}'")
    print(f"\nUser '{username}' created successfully.")


COMMANDS = {
    "create-user": create_user,
}


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m tradejournal.cli <command>")
        print(f"Commands: {', '.join(COMMANDS)}")
        sys.exit(1)

    setup_logging()
    command = COMMANDS.get(sys.argv[1])
    if command is None:
        print(f"Unknown command: {sys.argv[1]}")
        sys.exit(1)
    command()


if __name__ == "__main__":
    main()
