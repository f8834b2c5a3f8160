from enum import Enum


class FacetDimension(str, Enum):
    """
    Filterable product attribute dimensions.

    The value doubles as the query parameter name used by the filter codec.
    PRICE covers both the min and max bound.
    """
    CATEGORY = "category"
    BRAND = "brand"
    COLOR = "color"
    SIZE = "size"
    PRICE = "price"

    @classmethod
    def value_dimensions(cls) -> list['FacetDimension']:
        """Dimensions backed by a scalar string column on the product."""
        return [cls.BRAND, cls.COLOR, cls.SIZE]
