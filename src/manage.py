"""Ordering service management CLI.

Creates or drops the cart and order tables when the domain is configured with
a relational (sqlite or postgresql) provider, and runs cart maintenance.

Usage:
    python src/manage.py setup-db                          # Create all tables
    python src/manage.py drop-db                           # Drop all tables
    python src/manage.py detect-abandoned-carts --hours 48 # Flag idle carts
"""

import argparse
import sys


def setup_database():
    from ordering.domain import ordering
    from ordering.utils.db import setup_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Creating ordering database schema...")
    setup_db(ordering)
    print("Done.")


def drop_database():
    from ordering.domain import ordering
    from ordering.utils.db import drop_db

    print("Initializing ordering domain...")
    ordering.init()
    print("Dropping ordering database schema...")
    drop_db(ordering)
    print("Done.")


def detect_abandoned_carts(hours=None):
    """Flag idle carts as abandoned; meant to be run from a scheduler."""
    from ordering.cart.abandonment import DetectAbandonedCarts
    from ordering.domain import ordering

    ordering.init()
    with ordering.domain_context():
        count = ordering.process(DetectAbandonedCarts(idle_threshold_hours=hours), asynchronous=False)
    print(f"Marked {count} cart(s) as abandoned.")


def main():
    parser = argparse.ArgumentParser(description="Ordering service management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")
    abandon_parser = subparsers.add_parser("detect-abandoned-carts", help="Mark idle carts as abandoned")
    abandon_parser.add_argument("--hours", type=int, default=None, help="Idle threshold in hours")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    elif args.command == "detect-abandoned-carts":
        detect_abandoned_carts(args.hours)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
