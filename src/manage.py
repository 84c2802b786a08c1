"""Storefront management CLI.

Creates and drops database tables, and bootstraps the first admin account.

Usage:
    python src/manage.py setup-db                  # Create all tables
    python src/manage.py drop-db                   # Drop all tables
    python src/manage.py create-admin --name "Admin" --email admin@example.com
"""

import argparse
import getpass
import sys


def setup_databases():
    from storefront.domain import storefront
    from storefront.utils.db import setup_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Creating database schema...")
    setup_db(storefront)
    print("Done.")


def drop_databases():
    from storefront.domain import storefront
    from storefront.utils.db import drop_db

    print("Initializing storefront domain...")
    storefront.init()
    print("Dropping database schema...")
    drop_db(storefront)
    print("Done.")


def create_admin(name, email, password):
    """Register an admin account. Fails if the email is already registered."""
    from protean.exceptions import ValidationError
    from protean.utils.globals import current_domain

    from storefront.domain import storefront
    from storefront.identity.credentials import hash_password
    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import Role

    storefront.init()
    with storefront.domain_context():
        try:
            user_id = current_domain.process(
                RegisterUser(
                    name=name,
                    email=email,
                    password_hash=hash_password(password),
                    role=Role.ADMIN.value,
                ),
                asynchronous=False,
            )
        except ValidationError as exc:
            print(f"Could not create admin: {exc.messages}")
            return 1

    print(f"Admin {email} created ({user_id}).")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    admin_parser = subparsers.add_parser("create-admin", help="Create an admin account")
    admin_parser.add_argument("--name", required=True)
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--password", help="Prompted for when omitted")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    elif args.command == "create-admin":
        password = args.password or getpass.getpass("Admin password: ")
        sys.exit(create_admin(args.name, args.email, password))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
