#!/usr/bin/env python3
"""
Category id backfill script.

Upgrades posts written by older editor revisions, which only stored a
category string ("News > Local", "Opinion"), to the numeric category_id
used by all new writes. The legacy string is kept as is.

Usage:
    python scripts/backfill_category_ids.py [--dry-run]

Options:
    --dry-run    Report what would change without writing to the database
"""

import asyncio
import argparse
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from database.session import AsyncSessionFactory, dispose_engine
from services.post_categories import PostCategoryService, PostCategoryServiceError


def print_report(report: dict) -> None:
    """Print backfill statistics."""
    print("\n" + "=" * 60)
    print("Category Backfill Summary")
    print("=" * 60)
    print(f"Dry run:                {report['dry_run']}")
    print(f"Posts without id:       {report['total']}")
    print(f"Category ids assigned:  {report['updated']}")
    print(f"Unresolved:             {len(report['unresolved'])}")
    for item in report["unresolved"]:
        print(f"  [post {item['post_id']}] {item['category']!r}")
    print("=" * 60)


async def main():
    """Main entry point for the script."""
    parser = argparse.ArgumentParser(
        description="Backfill posts.category_id from legacy category strings"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report what would change without writing to the database"
    )
    args = parser.parse_args()

    try:
        async with AsyncSessionFactory() as session:
            service = PostCategoryService(session)
            report = await service.backfill_category_ids(dry_run=args.dry_run)
    except PostCategoryServiceError as e:
        print(f"\n✗ Backfill failed: {str(e)}")
        sys.exit(1)
    finally:
        await dispose_engine()

    print_report(report.to_dict())

    # Exit with error code if any value could not be resolved
    sys.exit(1 if report.unresolved else 0)


if __name__ == "__main__":
    asyncio.run(main())
