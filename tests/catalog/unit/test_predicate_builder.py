"""
Unit Tests: Filter Predicate Builder

Runs the built predicates against an in-memory catalog so the clause
semantics (OR within a dimension, AND across dimensions, inclusive price
bounds, omitted dimensions) are checked on real rows.
"""

import pytest
from sqlalchemy import select

from enums.facet_dimension import FacetDimension
from models.catalog import ProductFilters
from models.product import Product
from services.predicate import build_clauses, build_predicate, selected_values


@pytest.fixture
def catalog(create_category, create_product):
    shoes = create_category("shoes")
    hats = create_category("hats")
    return {
        "acme-red-shoe": create_product(price=500, brand="Acme", color="red", size="M", category=shoes),
        "acme-blue-shoe": create_product(price=20000, brand="Acme", color="blue", size="L", category=shoes),
        "globex-red-hat": create_product(price=1500, brand="Globex", color="red", size="S", category=hats),
        "bare": create_product(price=999),
    }


def matching_ids(session, filters, omit=frozenset()):
    rows = session.execute(select(Product.id).where(build_predicate(filters, omit=omit)))
    return {row[0] for row in rows}


def ids(catalog, *names):
    return {catalog[name].id for name in names}


def test_empty_filters_match_everything(session, catalog):
    assert build_clauses(ProductFilters()) == []
    assert matching_ids(session, ProductFilters()) == ids(catalog, *catalog)


def test_values_within_a_dimension_are_alternatives(session, catalog):
    filters = ProductFilters(colors={"red", "blue"})
    assert matching_ids(session, filters) == ids(catalog, "acme-red-shoe", "acme-blue-shoe", "globex-red-hat")


def test_dimensions_are_combined(session, catalog):
    filters = ProductFilters(brands={"Acme"}, colors={"red"})
    assert matching_ids(session, filters) == ids(catalog, "acme-red-shoe")


def test_category_filter_by_slug(session, catalog):
    filters = ProductFilters(category_slugs={"hats"})
    assert matching_ids(session, filters) == ids(catalog, "globex-red-hat")


def test_unknown_category_matches_nothing(session, catalog):
    assert matching_ids(session, ProductFilters(category_slugs={"no-such-category"})) == set()


def test_price_bounds_are_inclusive(session, catalog):
    filters = ProductFilters(min_price=500, max_price=1500)
    assert matching_ids(session, filters) == ids(catalog, "acme-red-shoe", "globex-red-hat", "bare")


def test_omitted_dimension_is_ignored(session, catalog):
    filters = ProductFilters(brands={"Globex"}, colors={"red"})
    assert matching_ids(session, filters, omit={FacetDimension.BRAND}) == \
        ids(catalog, "acme-red-shoe", "globex-red-hat")


def test_omitted_price_ignores_both_bounds(session, catalog):
    filters = ProductFilters(brands={"Acme"}, min_price=1000, max_price=2000)
    assert matching_ids(session, filters) == set()
    assert matching_ids(session, filters, omit={FacetDimension.PRICE}) == \
        ids(catalog, "acme-red-shoe", "acme-blue-shoe")


def test_selected_values():
    filters = ProductFilters(category_slugs={"hats"}, sizes={"M"})
    assert selected_values(filters, FacetDimension.CATEGORY) == frozenset({"hats"})
    assert selected_values(filters, FacetDimension.SIZE) == frozenset({"M"})
    with pytest.raises(ValueError):
        selected_values(filters, FacetDimension.PRICE)
