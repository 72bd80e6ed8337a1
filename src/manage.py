"""Storefront management CLI.

Creates and drops database schemas and seeds operator accounts.

Usage:
    python src/manage.py setup-db                   # Create all tables
    python src/manage.py drop-db                    # Drop all tables
    python src/manage.py show-db                    # List tables per provider
    python src/manage.py create-user "Ada" ada@example.com --role superadmin
"""

import argparse
import getpass
import sys

DOMAIN_NAMES = ["identity", "ordering"]


def _domains(names=None):
    from identity.domain import identity
    from ordering.domain import ordering

    all_domains = {"identity": identity, "ordering": ordering}
    targets = {n: all_domains[n] for n in names} if names else all_domains
    for name, domain in targets.items():
        print(f"Initializing {name} domain...")
        domain.init()
    return targets


def setup_databases(domains=None):
    """Create database schemas for the specified (or all) domains."""
    from shared.db import setup_db

    for name, domain in _domains(domains).items():
        print(f"Creating {name} database schema...")
        setup_db(domain)
        print(f"  {name} schema ready.")

    print("Done.")


def drop_databases(domains=None):
    """Drop database schemas for the specified (or all) domains."""
    from shared.db import drop_db

    for name, domain in _domains(domains).items():
        print(f"Dropping {name} database schema...")
        drop_db(domain)
        print(f"  {name} schema dropped.")

    print("Done.")


def show_databases(domains=None):
    from shared.db import describe_db

    for name, domain in _domains(domains).items():
        tables = describe_db(domain)
        if not tables:
            print(f"{name}: no relational providers configured")
        for provider, names in tables.items():
            print(f"{name} [{provider}]: {', '.join(names) or '(no tables)'}")


def create_user(name, email, password, role, phone=None):
    """Register a user with an explicit role (operators, support agents)."""
    from identity.shared.password import hash_password
    from identity.user.registration import RegisterUser

    identity = _domains(["identity"])["identity"]
    with identity.domain_context():
        user_id = identity.process(
            RegisterUser(
                name=name,
                email=email,
                password_hash=hash_password(password),
                phone=phone,
                role=role,
            ),
            asynchronous=False,
        )
    print(f"Created {role} user {email} ({user_id})")
    return user_id


def main():
    parser = argparse.ArgumentParser(description="Storefront management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for command, help_text in (
        ("setup-db", "Create all database tables"),
        ("drop-db", "Drop all database tables"),
        ("show-db", "List database tables"),
    ):
        sub = subparsers.add_parser(command, help=help_text)
        sub.add_argument(
            "--domain",
            choices=DOMAIN_NAMES,
            nargs="*",
            help="Specific domain(s) (default: all)",
        )

    user_parser = subparsers.add_parser("create-user", help="Create a user with a role")
    user_parser.add_argument("name")
    user_parser.add_argument("email")
    user_parser.add_argument("--role", default="customer", choices=["customer", "support", "admin", "superadmin"])
    user_parser.add_argument("--phone")
    user_parser.add_argument("--password", help="Prompted for when omitted")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_databases(args.domain)
    elif args.command == "drop-db":
        drop_databases(args.domain)
    elif args.command == "show-db":
        show_databases(args.domain)
    elif args.command == "create-user":
        password = args.password or getpass.getpass("Password: ")
        create_user(args.name, args.email, password, args.role, phone=args.phone)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
