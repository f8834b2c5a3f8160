"""
Catalog filter state transitions.

A pure function from (current state, user action) to (next state, query).
Debouncing slider input or pushing URLs is a UI concern; whatever the UI
finally commits arrives here as one action.
"""
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from enums.facet_dimension import FacetDimension
from exceptions.catalog import InvalidFilterException
from models.catalog import ProductFilters
from utils.filter_codec import (
    FILTER_FIELDS,
    MAX_PRICE_PARAM,
    MIN_PRICE_PARAM,
    FilterState,
    clamp_page,
    clamp_page_size,
    dollars_to_cents,
    encode,
)


class FilterAction(BaseModel):
    model_config = ConfigDict(frozen=True)


class ToggleValue(FilterAction):
    """Select the value if it is not selected, deselect it otherwise."""
    dimension: FacetDimension
    value: str


class SetPriceRange(FilterAction):
    """Price bounds in whole currency units; None clears a bound."""
    min_dollars: Decimal | None = None
    max_dollars: Decimal | None = None


class ClearDimension(FilterAction):
    dimension: FacetDimension


class ResetFilters(FilterAction):
    pass


class SetPage(FilterAction):
    page: int


class SetPageSize(FilterAction):
    page_size: int


def _toggle(state: FilterState, action: ToggleValue) -> FilterState:
    if action.dimension not in FILTER_FIELDS:
        raise InvalidFilterException(f"{action.dimension.value} cannot be toggled")
    field = FILTER_FIELDS[action.dimension]
    current = getattr(state.filters, field)
    value = action.value.strip()
    selected = current - {value} if value in current else current | {value}
    return state.model_copy(update={
        "filters": state.filters.model_copy(update={field: frozenset(v for v in selected if v)}),
        "page": 1,
    })


def _set_price_range(state: FilterState, action: SetPriceRange) -> FilterState:
    min_dollars, max_dollars = action.min_dollars, action.max_dollars
    # The lower handle cannot pass the upper one
    if min_dollars is not None and max_dollars is not None and min_dollars > max_dollars:
        min_dollars = max_dollars
    min_price = dollars_to_cents(min_dollars, MIN_PRICE_PARAM) if min_dollars is not None else None
    max_price = dollars_to_cents(max_dollars, MAX_PRICE_PARAM) if max_dollars is not None else None
    filters = ProductFilters.model_validate(
        {**state.filters.model_dump(), "min_price": min_price, "max_price": max_price})
    return state.model_copy(update={"filters": filters, "page": 1})


def _clear(state: FilterState, action: ClearDimension) -> FilterState:
    if action.dimension == FacetDimension.PRICE:
        update = {"min_price": None, "max_price": None}
    else:
        update = {FILTER_FIELDS[action.dimension]: frozenset()}
    return state.model_copy(update={"filters": state.filters.model_copy(update=update), "page": 1})


def transition(state: FilterState, action: FilterAction) -> FilterState:
    if isinstance(action, ToggleValue):
        return _toggle(state, action)
    if isinstance(action, SetPriceRange):
        return _set_price_range(state, action)
    if isinstance(action, ClearDimension):
        return _clear(state, action)
    if isinstance(action, ResetFilters):
        return FilterState(page_size=state.page_size)
    if isinstance(action, SetPage):
        return state.model_copy(update={"page": clamp_page(action.page)})
    if isinstance(action, SetPageSize):
        # A different page size invalidates the current offset
        return state.model_copy(update={"page_size": clamp_page_size(action.page_size), "page": 1})
    raise InvalidFilterException(f"unknown action {type(action).__name__}")


def apply_action(state: FilterState, action: FilterAction) -> tuple[FilterState, list[tuple[str, str]]]:
    """
    Applies a user action to the current filter state.

    Returns:
        Tuple of (next_state, query_pairs) where query_pairs is the canonical
        encoding of next_state
    """
    next_state = transition(state, action)
    return next_state, encode(next_state.filters, next_state.page, next_state.page_size)
