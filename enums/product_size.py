from enum import Enum


class ProductSize(str, Enum):
    """Apparel sizes a product can carry, smallest first."""

    XS = "XS"
    S = "S"
    M = "M"
    L = "L"
    XL = "XL"
    XXL = "XXL"

    @classmethod
    def from_string(cls, value: str) -> 'ProductSize':
        """
        Convert string to ProductSize enum.

        Handles case-insensitive matching and whitespace.

        Raises:
            ValueError: If value is not a valid size

        Examples:
            >>> ProductSize.from_string(" xl ")
            ProductSize.XL
        """
        if not value or not value.strip():
            raise ValueError("Size cannot be empty")

        normalized = value.strip().upper()
        for size in cls:
            if size.value == normalized:
                return size

        valid_sizes = [s.value for s in cls]
        raise ValueError(
            f"Invalid size '{value}'. Valid sizes: {', '.join(valid_sizes)}"
        )
