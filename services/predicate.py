"""
Filter Predicate Builder

Translates ProductFilters into a single SQLAlchemy boolean clause over the
products table. Clauses are independent of each other; the result is their
conjunction.
"""
from collections.abc import Collection

from sqlalchemy import and_, select, true, ColumnElement

from enums.facet_dimension import FacetDimension
from models.catalog import ProductFilters
from models.category import Category
from models.product import Product

VALUE_COLUMNS = {
    FacetDimension.BRAND: Product.brand,
    FacetDimension.COLOR: Product.color,
    FacetDimension.SIZE: Product.size,
}


def selected_values(filters: ProductFilters, dimension: FacetDimension) -> frozenset[str]:
    """Returns the selected set of a multi-valued dimension."""
    if dimension == FacetDimension.CATEGORY:
        return filters.category_slugs
    if dimension == FacetDimension.BRAND:
        return filters.brands
    if dimension == FacetDimension.COLOR:
        return filters.colors
    if dimension == FacetDimension.SIZE:
        return filters.sizes
    raise ValueError(f"{dimension} is not a multi-valued dimension")


def build_clauses(filters: ProductFilters,
                  omit: Collection[FacetDimension] = frozenset()) -> list[ColumnElement[bool]]:
    clauses = []

    if filters.category_slugs and FacetDimension.CATEGORY not in omit:
        category_ids = select(Category.id).where(Category.slug.in_(sorted(filters.category_slugs)))
        clauses.append(Product.category_id.in_(category_ids))

    for dimension, column in VALUE_COLUMNS.items():
        values = selected_values(filters, dimension)
        if values and dimension not in omit:
            clauses.append(column.in_(sorted(values)))

    if FacetDimension.PRICE not in omit:
        if filters.min_price is not None:
            clauses.append(Product.price >= filters.min_price)
        if filters.max_price is not None:
            clauses.append(Product.price <= filters.max_price)

    return clauses


def build_predicate(filters: ProductFilters,
                    omit: Collection[FacetDimension] = frozenset()) -> ColumnElement[bool]:
    """
    Builds the WHERE clause for the given filters.

    Args:
        filters: Active catalog filters
        omit: Dimensions whose clause is left out. Used by facet aggregation so
              a dimension's own selection does not narrow its own option list.

    Returns:
        Conjunction of the active clauses, or TRUE when nothing constrains the query
    """
    clauses = build_clauses(filters, omit)
    if not clauses:
        return true()
    return and_(*clauses)
