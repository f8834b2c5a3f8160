#!/usr/bin/env python3
"""
Script to fill the catalog with demo data

Creates 20 categories and 1000 products with random brand, color, size and a
price between $5 and $2000. Existing categories and products (matched by
slug) are left untouched, so running it twice does not duplicate anything.

Usage:
    python scripts/seed_catalog.py [--products N] [--categories N] [--random-seed N]
"""

import argparse
import asyncio
import random
import re
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import create_db_and_tables, get_db_session, session_commit
from enums.product_size import ProductSize
from models.category import CategoryDTO
from models.product import ProductDTO
from repositories.category import CategoryRepository
from repositories.product import ProductRepository

BRANDS = ['Acme', 'Globex', 'Umbrella', 'Wayne', 'Stark', 'Wonka', 'Initech', 'Hooli']
COLORS = ['black', 'white', 'gray', 'red', 'blue', 'green', 'yellow', 'purple', 'pink', 'orange', 'brown', 'beige']

# $5 to $2000 in cents
MIN_PRICE = 500
MAX_PRICE = 200000


def slugify(value: str) -> str:
    value = re.sub(r'[^a-z0-9\s-]', '', value.lower()).strip()
    value = re.sub(r'\s+', '-', value)
    return re.sub(r'-+', '-', value)


def make_categories(count: int) -> list[CategoryDTO]:
    return [CategoryDTO(name=f"Category {i + 1}", slug=slugify(f"Category {i + 1}")) for i in range(count)]


def make_products(rng: random.Random, categories: list[CategoryDTO], count: int) -> list[ProductDTO]:
    products = []
    for i in range(count):
        category = rng.choice(categories)
        name = f"Product {i + 1} in {category.name}"
        products.append(ProductDTO(
            name=name,
            slug=slugify(f"{name}-{i + 1}"),
            description=f"Description for {name}",
            price=rng.randint(MIN_PRICE, MAX_PRICE),
            images=[],
            brand=rng.choice(BRANDS),
            color=rng.choice(COLORS),
            size=rng.choice(list(ProductSize)).value,
            category_id=category.id,
        ))
    return products


async def seed(session: AsyncSession | Session,
               rng: random.Random,
               category_count: int = 20,
               product_count: int = 1000) -> tuple[list[CategoryDTO], int]:
    """
    Inserts the demo catalog into the given session without committing.

    Returns:
        Tuple of (all seeded categories, number of newly inserted products)
    """
    categories = []
    missing_categories = []
    for category in make_categories(category_count):
        existing = await CategoryRepository.get_by_slug(category.slug, session)
        if existing is None:
            missing_categories.append(category)
        else:
            categories.append(existing)
    categories.extend(await CategoryRepository.add_many(missing_categories, session))
    categories.sort(key=lambda category: category.id)

    products = []
    for product in make_products(rng, categories, product_count):
        if await ProductRepository.get_by_slug(product.slug, session) is None:
            products.append(product)
    product_ids = await ProductRepository.add_many(products, session)
    return categories, len(product_ids)


async def main():
    parser = argparse.ArgumentParser(description="Seed the storefront catalog with demo data")
    parser.add_argument("--products", type=int, default=1000)
    parser.add_argument("--categories", type=int, default=20)
    parser.add_argument("--random-seed", type=int, default=None)
    args = parser.parse_args()

    print("🌱 Seeding catalog...")
    try:
        await create_db_and_tables()
        async with get_db_session() as session:
            categories, inserted = await seed(session, random.Random(args.random_seed),
                                              args.categories, args.products)
            await session_commit(session)
        print(f"✅ Seed completed: categories = {len(categories)}, products inserted = {inserted}")
    except Exception as e:
        print(f"❌ Error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
