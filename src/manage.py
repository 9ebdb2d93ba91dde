"""Vehicle Reviews database management CLI.

Creates and drops the review and vote tables on SQL-backed providers.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_databases():
    """Create the review schema."""
    from vehicle_reviews.domain import reviews
    from vehicle_reviews.utils.db import setup_db

    print("Initializing vehicle_reviews domain...")
    reviews.init()
    print("Creating vehicle_reviews database schema...")
    setup_db(reviews)
    print("Done.")


def drop_databases():
    """Drop the review schema."""
    from vehicle_reviews.domain import reviews
    from vehicle_reviews.utils.db import drop_db

    print("Initializing vehicle_reviews domain...")
    reviews.init()
    print("Dropping vehicle_reviews database schema...")
    drop_db(reviews)
    print("Done.")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Vehicle Reviews database management")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    if args.command == "setup-db":
        setup_databases()
    elif args.command == "drop-db":
        drop_databases()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
