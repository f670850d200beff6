"""
Seed script to mirror the static category taxonomy into the categories table.

taxonomy.definitions is the source of truth; this script only copies it so
consumers that query the database see the same ids, url paths and
hierarchical names. Rows whose id is no longer in the taxonomy are reported,
never deleted, because published posts may still reference them.
"""

import asyncio
import sys
from pathlib import Path
from typing import Optional

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from sqlalchemy.ext.asyncio import AsyncSession

from database.models import Category
from database.repositories import CategoryRepository
from taxonomy.tree import Taxonomy, get_taxonomy


async def sync_categories(session: AsyncSession, taxonomy: Optional[Taxonomy] = None) -> dict:
    """
    Upsert every taxonomy node into the categories table.

    Nodes are written in declaration order, so parents exist before their
    children.

    Args:
        session: Database session (committed by this function)
        taxonomy: Taxonomy to mirror (defaults to the published taxonomy)

    Returns:
        Dictionary with statistics:
        - written: Number of rows inserted or updated
        - stale_ids: Ids present in the table but not in the taxonomy
    """
    if taxonomy is None:
        taxonomy = get_taxonomy()
    repo = CategoryRepository(session)

    existing = await repo.get_all()
    stale_ids = sorted(row.id for row in existing if row.id not in taxonomy)

    written = 0
    for node in taxonomy.get_all_nodes():
        await repo.upsert(Category(
            id=node.id,
            name=node.name,
            display_name=node.display_name,
            parent_id=node.parent_id,
            level=node.level,
            url_path=node.url_path,
            hierarchical_name=node.hierarchical_name,
        ))
        written += 1

    await session.commit()
    return {"written": written, "stale_ids": stale_ids}


async def main():
    """Main execution."""
    from database.session import AsyncSessionFactory, dispose_engine

    print("=" * 80)
    print("Seeding categories table from taxonomy definitions")
    print("=" * 80)

    try:
        async with AsyncSessionFactory() as session:
            stats = await sync_categories(session)
        print(f"  Categories written: {stats['written']}")
        if stats["stale_ids"]:
            print(f"  Stale category ids (not in taxonomy): {stats['stale_ids']}")
        print("\n✓ Seed completed successfully")
    except Exception as e:
        print(f"\n✗ Error during seed: {str(e)}")
        raise
    finally:
        await dispose_engine()


if __name__ == "__main__":
    asyncio.run(main())
