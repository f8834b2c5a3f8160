from enum import Enum


class PriceRounding(str, Enum):
    """
    Strategy for converting user supplied dollar bounds into cents.

    ROUND: round(dollars * 100) for both bounds (default)
    OUTWARD: floor for the lower bound, ceil for the upper bound, so a
             boundary-priced product is never excluded by the conversion
    """
    ROUND = "round"
    OUTWARD = "outward"
