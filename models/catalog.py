import math

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

import config
from models.product import ProductDTO


class ProductFilters(BaseModel):
    """
    Internal filter model of the catalog.

    Multi-valued dimensions are frozensets; an empty set means "no constraint on
    this dimension", never "exclude everything". Price bounds are inclusive and
    expressed in cents.
    """
    model_config = ConfigDict(frozen=True)

    category_slugs: frozenset[str] = frozenset()
    brands: frozenset[str] = frozenset()
    colors: frozenset[str] = frozenset()
    sizes: frozenset[str] = frozenset()
    min_price: int | None = Field(default=None, ge=0)
    max_price: int | None = Field(default=None, ge=0)

    @field_validator('category_slugs', 'brands', 'colors', 'sizes', mode='before')
    @classmethod
    def drop_blank_values(cls, v):
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(str(value).strip() for value in v if value is not None and str(value).strip())

    @model_validator(mode='after')
    def check_price_range(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError(f"min_price ({self.min_price}) must not exceed max_price ({self.max_price})")
        return self

    @property
    def is_empty(self) -> bool:
        return not (self.category_slugs or self.brands or self.colors or self.sizes
                    or self.min_price is not None or self.max_price is not None)


class FacetValue(BaseModel):
    value: str
    count: int = 0
    selected: bool = False


class CategoryFacet(BaseModel):
    slug: str
    name: str
    count: int = 0
    selected: bool = False


class PriceBounds(BaseModel):
    min: int
    max: int


class PagedResult(BaseModel):
    total: int = Field(ge=0)
    items: list[ProductDTO] = []
    page: int = 1
    page_size: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.page_size))


class CatalogPage(BaseModel):
    """Everything the catalog view needs for one filter state."""
    categories: list[CategoryFacet]
    brands: list[FacetValue]
    colors: list[FacetValue]
    sizes: list[FacetValue]
    price_bounds: PriceBounds
    items: list[ProductDTO]
    total: int
    page: int
    page_size: int
    total_pages: int
    currency: str = config.CURRENCY
    query: str
    prev_query: str | None = None
    next_query: str | None = None
