"""
Filter State Codec

Maps the external catalog query representation (repeated query parameters,
dollar price bounds) to the internal ProductFilters model (typed, deduplicated,
cent price bounds) and back.

Query parameters:
    category, brand, color, size  - repeatable, one value each
    min, max                      - price bounds in whole currency units
    page                          - 1-based page number
    perPage                       - page size, clamped to [PAGE_SIZE_MIN, PAGE_SIZE_MAX]
"""
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, ROUND_FLOOR, ROUND_CEILING
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict

import config
from enums.facet_dimension import FacetDimension
from enums.price_rounding import PriceRounding
from models.catalog import ProductFilters

MIN_PRICE_PARAM = "min"
MAX_PRICE_PARAM = "max"
PAGE_PARAM = "page"
PAGE_SIZE_PARAM = "perPage"

# Largest value a store INTEGER column (signed 64-bit) can hold
SQL_INTEGER_MAX = 2 ** 63 - 1
MAX_PRICE_DOLLARS = Decimal(SQL_INTEGER_MAX // 100)

FILTER_FIELDS = {
    FacetDimension.CATEGORY: "category_slugs",
    FacetDimension.BRAND: "brands",
    FacetDimension.COLOR: "colors",
    FacetDimension.SIZE: "sizes",
}


class FilterState(BaseModel):
    """Full catalog view state: filters plus the requested page."""
    model_config = ConfigDict(frozen=True)

    filters: ProductFilters = ProductFilters()
    page: int = 1
    page_size: int = config.PAGE_SIZE_DEFAULT


def _get_list(params, key: str) -> list[str]:
    # Starlette QueryParams / multidict style first, then plain mappings
    if hasattr(params, "getlist"):
        return [str(value) for value in params.getlist(key)]
    value = params.get(key)
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return [str(v) for v in value]
    return [str(value)]


def _get_first(params, key: str) -> str | None:
    values = _get_list(params, key)
    return values[0] if values else None


def _parse_decimal(raw: str | None) -> Decimal | None:
    if raw is None or not str(raw).strip():
        return None
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def dollars_to_cents(dollars: Decimal, bound: str = MIN_PRICE_PARAM) -> int:
    """
    Converts a dollar amount into integer cents.

    With PriceRounding.ROUND both bounds use round(dollars * 100). With
    PriceRounding.OUTWARD the lower bound is floored and the upper bound is
    ceiled, so the conversion itself never excludes a boundary-priced product.
    Results are clamped to [0, SQL_INTEGER_MAX].
    """
    if dollars <= 0:
        return 0
    if dollars >= MAX_PRICE_DOLLARS:
        return int(MAX_PRICE_DOLLARS) * 100
    cents = dollars * 100
    if config.PRICE_BOUND_ROUNDING == PriceRounding.OUTWARD:
        rounding = ROUND_FLOOR if bound == MIN_PRICE_PARAM else ROUND_CEILING
    else:
        rounding = ROUND_HALF_UP
    return max(0, int(cents.to_integral_value(rounding=rounding)))


def cents_to_dollars(cents: int) -> str:
    """
    Formats cents as a whole-unit string, round(cents / 100).

    Amounts that are not whole currency units (only reachable with fractional
    input) keep their exact decimal form so that decoding them gives the same cents.
    """
    if cents % 100 == 0:
        return str(cents // 100)
    return str((Decimal(cents) / 100).normalize())


def max_page() -> int:
    """Highest page whose offset still fits a store INTEGER at the largest page size."""
    return SQL_INTEGER_MAX // config.PAGE_SIZE_MAX


def clamp_page(page: int | None) -> int:
    if page is None or page < 1:
        return 1
    return min(page, max_page())


def clamp_page_size(page_size: int | None) -> int:
    if page_size is None:
        return config.PAGE_SIZE_DEFAULT
    return min(config.PAGE_SIZE_MAX, max(config.PAGE_SIZE_MIN, page_size))


def decode_price(params: Mapping, key: str) -> int | None:
    dollars = _parse_decimal(_get_first(params, key))
    if dollars is None:
        return None
    return dollars_to_cents(dollars, key)


def decode_filters(params: Mapping) -> ProductFilters:
    """
    Builds ProductFilters from raw query parameters.

    Blank values are dropped, repeated values are deduplicated, absent or
    non-numeric price bounds stay unset. Inverted bounds are swapped.
    """
    min_price = decode_price(params, MIN_PRICE_PARAM)
    max_price = decode_price(params, MAX_PRICE_PARAM)
    if min_price is not None and max_price is not None and min_price > max_price:
        min_price, max_price = max_price, min_price

    return ProductFilters(
        category_slugs=_get_list(params, FacetDimension.CATEGORY.value),
        brands=_get_list(params, FacetDimension.BRAND.value),
        colors=_get_list(params, FacetDimension.COLOR.value),
        sizes=_get_list(params, FacetDimension.SIZE.value),
        min_price=min_price,
        max_price=max_price,
    )


def decode_page(params: Mapping) -> int:
    return clamp_page(_parse_int(_get_first(params, PAGE_PARAM)))


def decode_page_size(params: Mapping) -> int:
    return clamp_page_size(_parse_int(_get_first(params, PAGE_SIZE_PARAM)))


def decode(params: Mapping) -> FilterState:
    return FilterState(
        filters=decode_filters(params),
        page=decode_page(params),
        page_size=decode_page_size(params),
    )


def encode_filters(filters: ProductFilters) -> list[tuple[str, str]]:
    pairs = []
    for dimension, field in FILTER_FIELDS.items():
        for value in sorted(getattr(filters, field)):
            pairs.append((dimension.value, value))
    if filters.min_price is not None:
        pairs.append((MIN_PRICE_PARAM, cents_to_dollars(filters.min_price)))
    if filters.max_price is not None:
        pairs.append((MAX_PRICE_PARAM, cents_to_dollars(filters.max_price)))
    return pairs


def encode(filters: ProductFilters, page: int, page_size: int) -> list[tuple[str, str]]:
    """
    Canonical query representation of a filter state.

    Values are emitted sorted so equal states always produce the same query.
    """
    pairs = encode_filters(filters)
    pairs.append((PAGE_PARAM, str(page)))
    pairs.append((PAGE_SIZE_PARAM, str(page_size)))
    return pairs


def to_query_string(filters: ProductFilters, page: int, page_size: int) -> str:
    return urlencode(encode(filters, page, page_size))
