"""
Unit Tests: Product model constraints

Rows the DTO could not load are rejected at write time, so a catalog read
never meets them.
"""

import pytest
from sqlalchemy.exc import IntegrityError

from enums.product_size import ProductSize
from models.product import Product, ProductDTO


def _product(**overrides) -> Product:
    values = dict(name="Tee", slug="tee", description="", price=1000, images=[])
    values.update(overrides)
    return Product(**values)


class TestSizeConstraint:

    @pytest.mark.parametrize("size", [s.value for s in ProductSize] + [None])
    def test_known_sizes_are_stored(self, session, size):
        session.add(_product(size=size))
        session.flush()

        stored = session.query(Product).one()
        assert ProductDTO.model_validate(stored, from_attributes=True).size == size

    @pytest.mark.parametrize("size", ["Q", "xl", ""])
    def test_unknown_size_is_rejected(self, session, size):
        session.add(_product(size=size))
        with pytest.raises(IntegrityError):
            session.flush()


class TestPriceConstraint:

    def test_negative_price_is_rejected(self, session):
        session.add(_product(price=-1))
        with pytest.raises(IntegrityError):
            session.flush()
