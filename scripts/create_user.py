#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from dotenv import load_dotenv

from resmedx.auth.users import register
from resmedx.core.errors import DuplicateEmail
from resmedx.infra import mongo


def main() -> None:
    load_dotenv()
    name = input("Name: ").strip()
    email = input("Email: ").strip()
    if not email:
        raise SystemExit("Email is required")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")
    if not pw1:
        raise SystemExit("Password is required")

    db = mongo.get_db()
    mongo.ensure_indexes(db)
    try:
        register(db, name=name, email=email, password=pw1)
    except DuplicateEmail:
        raise SystemExit(f"User already exists: {email}")
    finally:
        mongo.close()
    print(f"OK -> {email} ({mongo.db_name()})")


if __name__ == "__main__":
    main()
