"""
Fallback catalog fixtures.

Served instead of live facet data when the store cannot be read (or when
MOCK_DATA is enabled), so the catalog stays renderable. Every use is logged by
the caller; these values are never written anywhere.
"""
from enums.facet_dimension import FacetDimension
from models.category import CategoryDTO

FALLBACK_CATEGORIES = [
    CategoryDTO(slug="category-1", name="Category 1"),
    CategoryDTO(slug="category-2", name="Category 2"),
    CategoryDTO(slug="category-3", name="Category 3"),
]

FALLBACK_CATEGORY_COUNTS = {category.slug: 1 for category in FALLBACK_CATEGORIES}

FALLBACK_VALUES = {
    FacetDimension.BRAND: ["Acme", "Globex", "Umbrella"],
    FacetDimension.COLOR: ["black", "blue", "red", "white"],
    FacetDimension.SIZE: ["L", "M", "S"],
}

FALLBACK_COUNTS = {
    FacetDimension.BRAND: {"Acme": 10, "Globex": 8, "Umbrella": 6},
    FacetDimension.COLOR: {"black": 12, "white": 9, "red": 4, "blue": 7},
    FacetDimension.SIZE: {"S": 5, "M": 9, "L": 6},
}

# Slider range in cents ($0 - $2000) when no price data is available
DEFAULT_PRICE_BOUNDS = (0, 200000)
