#!/usr/bin/env python3
"""Rebuild the category catalog from the tools in the configured record store."""

import argparse
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))

from app.config import settings  # noqa: E402
from app.services import CategoryService, get_storage_service  # noqa: E402


def populate_categories() -> list:
    """Run the rebuild against the store selected by STORAGE_MODE."""
    storage = get_storage_service()
    service = CategoryService(storage.records, storage.categories)
    return service.rebuild()


def print_categories(categories: list):
    """Print one line per rebuilt category."""
    print(f"Created {len(categories)} categories:")
    for category in categories:
        print(f"  {category.icon} {category.name}: {category.tool_count} tools")


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Rebuild the category catalog from the stored tools",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                  # Rebuild using STORAGE_MODE from the environment
  %(prog)s --verbose        # Also show repository logging
        """
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level="DEBUG" if args.verbose else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    print("=" * 60)
    print(f"Category rebuild ({settings.storage_mode} mode)")
    print("=" * 60)

    try:
        categories = populate_categories()
    except Exception as e:
        print(f"Error populating categories: {e}")
        sys.exit(1)

    print_categories(categories)
    print("=" * 60)


if __name__ == "__main__":
    main()
