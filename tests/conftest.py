"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import itertools
import os
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timedelta

import pytest

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Environment must be in place before config is imported
os.environ["RUNTIME_ENVIRONMENT"] = "TEST"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["MOCK_DATA"] = "false"
os.environ.setdefault("PRICE_BOUND_ROUNDING", "round")

from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from models.base import Base
from models.category import Category
from models.product import Product


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """In-memory SQLite shared by every connection (TestClient runs the app in another thread)."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    """Sync session; repositories accept it through the dual-mode db helpers."""
    session = Session(engine, expire_on_commit=False)
    yield session
    session.rollback()
    session.close()


@pytest.fixture
def session_factory(session):
    """Session factory for fan-out reads; every read shares the test session."""

    @asynccontextmanager
    async def factory():
        yield session

    return factory


# ============================================================================
# Catalog Data Fixtures
# ============================================================================

@pytest.fixture
def create_category(session):
    def _create(slug: str, name: str | None = None) -> Category:
        category = Category(slug=slug, name=name or slug.replace("-", " ").title())
        session.add(category)
        session.flush()
        return category

    return _create


@pytest.fixture
def create_product(session):
    """
    Creates products with strictly increasing created_at, so the product
    created last is the first one in catalog order.
    """
    counter = itertools.count(1)
    base_time = datetime(2024, 1, 1)

    def _create(price: int = 1000,
                brand: str | None = None,
                color: str | None = None,
                size: str | None = None,
                category: Category | None = None,
                slug: str | None = None) -> Product:
        n = next(counter)
        product = Product(
            name=f"Product {n}",
            slug=slug or f"product-{n}",
            description="",
            price=price,
            images=[],
            brand=brand,
            color=color,
            size=size,
            category_id=category.id if category is not None else None,
            created_at=base_time + timedelta(minutes=n),
        )
        session.add(product)
        session.flush()
        return product

    return _create
