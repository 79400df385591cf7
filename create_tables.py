#!/usr/bin/env python3
"""
Create the users and tasks tables and optionally seed a Manager account.

    python create_tables.py
    python create_tables.py --manager admin --password secret
"""

import argparse
import logging

from taskdesk.database import Base, SessionLocal, engine
from taskdesk.models import Role
from taskdesk.services.table_store import SqlTableStore
from taskdesk.utils.security import get_password_hash

logger = logging.getLogger(__name__)


def create_tables(drop: bool = False):
    """Create all tables"""
    if drop:
        Base.metadata.drop_all(bind=engine)
        logger.info("Dropped existing tables")
    Base.metadata.create_all(bind=engine)
    logger.info("All tables created successfully")


def create_default_manager(username: str, password: str):
    """Create a Manager account unless the username is taken"""
    store = SqlTableStore(SessionLocal)
    if store.select("users", {"username": username}, columns=("id",), limit=1):
        logger.info(f"User {username!r} already exists, skipping")
        return

    user = store.insert("users", {
        "username": username,
        "password_hash": get_password_hash(password),
        "role": Role.MANAGER.value,
    })
    logger.info(f"Created manager {username!r} ({user['id']})")


def main():
    parser = argparse.ArgumentParser(description="Create the Task Desk schema")
    parser.add_argument("--drop", action="store_true", help="drop existing tables first")
    parser.add_argument("--manager", help="username of a Manager account to seed")
    parser.add_argument("--password", help="password for the seeded Manager")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")

    create_tables(drop=args.drop)
    if args.manager:
        if not args.password:
            parser.error("--password is required with --manager")
        create_default_manager(args.manager, args.password)


if __name__ == "__main__":
    main()
