import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import AbstractAsyncContextManager
from typing import Any, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from db import get_db_session
from enums.facet_dimension import FacetDimension
from exceptions.store import StoreUnavailableException
from models.catalog import CatalogPage, PagedResult, PriceBounds, ProductFilters
from models.product import ProductDTO
from repositories.category import CategoryRepository
from repositories.product import ProductRepository
from services.facet import FacetService
from services.fallback import (
    DEFAULT_PRICE_BOUNDS,
    FALLBACK_CATEGORIES,
    FALLBACK_CATEGORY_COUNTS,
    FALLBACK_COUNTS,
    FALLBACK_VALUES,
)
from services.predicate import build_predicate, selected_values
from services.reconciler import reconcile_category_counts, reconcile_counts
from utils.filter_codec import FilterState, clamp_page, clamp_page_size, to_query_string

logger = logging.getLogger(__name__)

T = TypeVar("T")
SessionFactory = Callable[[], AbstractAsyncContextManager[AsyncSession | Session]]


async def _read_or_fallback(session_factory: SessionFactory,
                            operation: str,
                            query: Callable[[AsyncSession | Session], Awaitable[T]],
                            fallback: T) -> T:
    """
    Runs one catalog read on its own session.

    Reads degrade instead of failing: a StoreUnavailableException is logged and
    replaced by the fallback so the rest of the page can still be assembled.
    """
    try:
        async with session_factory() as session:
            return await query(session)
    except StoreUnavailableException as e:
        logger.warning(f"[Catalog] {operation} degraded to fallback: {e!r}")
        return fallback


class CatalogService:

    @staticmethod
    async def get_page(filters: ProductFilters,
                       page: int,
                       page_size: int,
                       session: AsyncSession | Session) -> PagedResult:
        """
        One page of products matching every active filter, newest first.

        The total always covers the full matching set. A page past the end is
        not an error; it yields no items.
        """
        page = clamp_page(page)
        page_size = clamp_page_size(page_size)
        predicate = build_predicate(filters)
        total = await ProductRepository.count(predicate, session)
        offset = (page - 1) * page_size
        if offset >= total:
            return PagedResult(total=total, items=[], page=page, page_size=page_size)
        items = await ProductRepository.find_many(predicate, offset, page_size, session)
        return PagedResult(total=total, items=items, page=page, page_size=page_size)

    @staticmethod
    async def get_product(slug: str, session: AsyncSession | Session) -> ProductDTO | None:
        try:
            return await ProductRepository.get_by_slug(slug, session)
        except StoreUnavailableException as e:
            logger.warning(f"[Catalog] Product lookup degraded to not-found: {e!r}")
            return None

    @staticmethod
    async def get_catalog(state: FilterState,
                          session_factory: SessionFactory = get_db_session) -> CatalogPage:
        """
        Assembles the full catalog view for one filter state.

        The facet queries and the page query are independent reads over the
        same filter snapshot, so they run concurrently, each on its own session.
        """
        filters = state.filters
        page = clamp_page(state.page)
        page_size = clamp_page_size(state.page_size)

        def read(operation: str, query: Callable[[Any], Awaitable[T]], fallback: T) -> Awaitable[T]:
            return _read_or_fallback(session_factory, operation, query, fallback)

        if config.MOCK_DATA:
            logger.info("[Catalog] MOCK_DATA enabled, serving fixture facets")
            facet_reads = [
                _fixture(FALLBACK_CATEGORIES),
                _fixture(FALLBACK_CATEGORY_COUNTS),
                _fixture(FALLBACK_CATEGORIES),
            ]
            for dimension in FacetDimension.value_dimensions():
                facet_reads.append(_fixture(FALLBACK_VALUES[dimension]))
                facet_reads.append(_fixture(FALLBACK_COUNTS[dimension]))
            facet_reads.append(_fixture(None))
        else:
            facet_reads = [
                read("available_categories",
                     lambda s: FacetService.available_categories(filters, s), FALLBACK_CATEGORIES),
                read("category_counts",
                     lambda s: FacetService.category_counts(filters, s), FALLBACK_CATEGORY_COUNTS),
                read("all_categories", CategoryRepository.get_all, FALLBACK_CATEGORIES),
            ]
            for dimension in FacetDimension.value_dimensions():
                facet_reads.append(read(f"{dimension.value}_values",
                                        lambda s, d=dimension: FacetService.available_values(d, filters, s),
                                        FALLBACK_VALUES[dimension]))
                facet_reads.append(read(f"{dimension.value}_counts",
                                        lambda s, d=dimension: FacetService.value_counts(d, filters, s),
                                        FALLBACK_COUNTS[dimension]))
            facet_reads.append(read("price_bounds", lambda s: FacetService.price_bounds(filters, s), None))

        page_read = read("page",
                         lambda s: CatalogService.get_page(filters, page, page_size, s),
                         PagedResult(total=0, items=[], page=page, page_size=page_size))

        results = await asyncio.gather(*facet_reads, page_read)
        available_categories, category_counts, all_categories = results[:3]
        value_results = results[3:9]
        price_range, paged = results[9], results[10]

        names_by_slug = {category.slug: category.name for category in all_categories}
        categories = reconcile_category_counts(
            available_categories, filters.category_slugs, names_by_slug, category_counts)

        value_facets = {}
        for index, dimension in enumerate(FacetDimension.value_dimensions()):
            values, counts = value_results[2 * index], value_results[2 * index + 1]
            value_facets[dimension] = reconcile_counts(values, selected_values(filters, dimension), counts)

        lowest, highest = price_range or DEFAULT_PRICE_BOUNDS
        total_pages = paged.total_pages

        logger.debug(f"[Catalog] page={page}/{total_pages} size={page_size} total={paged.total}")

        return CatalogPage(
            categories=categories,
            brands=value_facets[FacetDimension.BRAND],
            colors=value_facets[FacetDimension.COLOR],
            sizes=value_facets[FacetDimension.SIZE],
            price_bounds=PriceBounds(min=lowest, max=highest),
            items=paged.items,
            total=paged.total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            query=to_query_string(filters, page, page_size),
            prev_query=to_query_string(filters, min(page - 1, total_pages), page_size) if page > 1 else None,
            next_query=to_query_string(filters, page + 1, page_size) if page < total_pages else None,
        )


async def _fixture(value: T) -> T:
    return value
