#!/usr/bin/env python3
"""Seed the demo catalog.

Creates the database tables and loads the demo categories, product types,
products and variants. Optionally prints bearer tokens for local testing.

Usage:
    python scripts/seed_catalog.py
    python scripts/seed_catalog.py --no-clear
    python scripts/seed_catalog.py --print-tokens --admin-id 1 --shopper-id 2
"""

import argparse
import asyncio

from storefront.api.principal import encode_principal
from storefront.catalog.service import CatalogService
from storefront.domain.principal import Role
from storefront.infrastructure.database import async_session_factory, create_tables, engine


async def seed(clear: bool = True) -> dict:
    """Seed the demo catalog.

    Args:
        clear: Whether to clear existing catalog and cart rows.

    Returns:
        Seeding result.
    """
    async with async_session_factory() as session:
        service = CatalogService(session)
        return await service.seed_catalog(clear_existing=clear)


async def main() -> None:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Seed the storefront demo catalog",
    )
    parser.add_argument(
        "--no-clear",
        action="store_true",
        help="Don't clear existing catalog and cart rows before seeding",
    )
    parser.add_argument(
        "--print-tokens",
        action="store_true",
        help="Print bearer tokens for a local admin and shopper",
    )
    parser.add_argument("--admin-id", type=int, default=1, help="Admin user id (default: 1)")
    parser.add_argument("--shopper-id", type=int, default=2, help="Shopper user id (default: 2)")

    args = parser.parse_args()

    print("=" * 60)
    print("Storefront Catalog Seeder")
    print("=" * 60)
    print(f"Clear existing: {not args.no_clear}")
    print()

    print("Creating database tables...")
    await create_tables()
    print("Tables ready.")
    print()

    print("Seeding demo catalog...")
    try:
        result = await seed(clear=not args.no_clear)
    finally:
        await engine.dispose()

    print(f"  ✓ Deleted: {result['deleted']} existing products")
    print(f"  ✓ Categories: {result['categories_created']}")
    print(f"  ✓ Product types: {result['product_types_created']}")
    print(f"  ✓ Products: {result['products_created']}")
    print(f"  ✓ Variants: {result['variants_created']}")
    print()

    if args.print_tokens:
        print("Bearer tokens (1 hour):")
        print(f"  Admin   ({args.admin_id}): {encode_principal(args.admin_id, Role.ADMIN)}")
        print(f"  Shopper ({args.shopper_id}): {encode_principal(args.shopper_id)}")
        print()

    print("=" * 60)
    print("Seeding complete!")
    print("=" * 60)


if __name__ == "__main__":
    asyncio.run(main())
