import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from enums.facet_dimension import FacetDimension
from models.catalog import ProductFilters
from models.category import CategoryDTO
from repositories.category import CategoryRepository
from repositories.product import ProductRepository
from services.predicate import VALUE_COLUMNS, build_predicate

logger = logging.getLogger(__name__)


def _value_column(dimension: FacetDimension):
    if dimension not in VALUE_COLUMNS:
        raise ValueError(f"{dimension} is not a value facet (expected one of brand, color, size)")
    return VALUE_COLUMNS[dimension]


class FacetService:
    """
    Facet aggregation over the product catalog.

    Every aggregation for dimension D runs under the active filters with D's
    own clause omitted, so selecting a value never hides its siblings (or
    itself) from D's option list. Store errors are not handled here; they
    surface as StoreUnavailableException and the caller picks the fallback.
    """

    @staticmethod
    async def available_values(dimension: FacetDimension,
                               filters: ProductFilters,
                               session: AsyncSession | Session) -> list[str]:
        """Distinct non-empty values of a brand/color/size facet, ascending."""
        column = _value_column(dimension)
        predicate = build_predicate(filters, omit={dimension})
        return await ProductRepository.get_distinct_values(column, predicate, session)

    @staticmethod
    async def value_counts(dimension: FacetDimension,
                           filters: ProductFilters,
                           session: AsyncSession | Session) -> dict[str, int]:
        """Matching product count per facet value; products without a value count nowhere."""
        column = _value_column(dimension)
        predicate = build_predicate(filters, omit={dimension})
        return await ProductRepository.count_by_value(column, predicate, session)

    @staticmethod
    async def available_categories(filters: ProductFilters,
                                   session: AsyncSession | Session) -> list[CategoryDTO]:
        """
        Categories that still have matching products, ordered by display name.

        Category is a reference rather than a product column, so the distinct
        category ids are collected first and then resolved to slug and name.
        """
        predicate = build_predicate(filters, omit={FacetDimension.CATEGORY})
        category_ids = await ProductRepository.get_distinct_category_ids(predicate, session)
        categories = await CategoryRepository.get_by_ids(category_ids, session)
        return sorted(categories.values(), key=lambda category: (category.name, category.slug))

    @staticmethod
    async def category_counts(filters: ProductFilters,
                              session: AsyncSession | Session) -> dict[str, int]:
        """Matching product count per category slug."""
        predicate = build_predicate(filters, omit={FacetDimension.CATEGORY})
        counts_by_id = await ProductRepository.count_by_category(predicate, session)
        categories = await CategoryRepository.get_by_ids(list(counts_by_id), session)
        return {
            categories[category_id].slug: count
            for category_id, count in counts_by_id.items()
            if category_id in categories
        }

    @staticmethod
    async def price_bounds(filters: ProductFilters,
                           session: AsyncSession | Session) -> tuple[int, int] | None:
        """Lowest and highest price (cents) under every filter except price itself."""
        predicate = build_predicate(filters, omit={FacetDimension.PRICE})
        return await ProductRepository.get_price_range(predicate, session)
