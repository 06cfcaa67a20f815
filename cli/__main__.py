#!/usr/bin/env python3
"""
Canopy CLI - command-line interface for the category hierarchy.

Usage:
    python -m cli <command> <subcommand> [options]

Commands:
    categories   Browse and manage categories
    migrate      Database migrations

Examples:
    python -m cli migrate apply
    python -m cli categories seed
    python -m cli categories tree
    python -m cli categories create Printers --parent <key>
    python -m cli categories update <key> --root
    python -m cli categories delete <key>
"""

import sys
import argparse
from cli import categories, migrate
from config import load_config
from services.base import Services
from db.manager import DatabaseManager
from logger import setup_logging


def main():
    """Main CLI entry point with subcommands."""
    parser = argparse.ArgumentParser(
        prog="cli",
        description="Canopy - hierarchical category management",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
        required=True,
    )

    categories.setup_parser(subparsers)
    migrate.setup_parser(subparsers)

    args = parser.parse_args()

    if hasattr(args, "func"):
        try:
            config = load_config()
            setup_logging(config)

            # migrate works on the raw database; everything else on services
            if args.command == "migrate":
                args.func(args, DatabaseManager(config))
            else:
                args.func(args, Services(config))
        except Exception as e:
            print(f"Error: {e}")
            sys.exit(1)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
