"""
Unit Tests: CartService

Tests for services/cart.py covering:
- get_or_create() - lazy cart creation from a missing/unknown token
- add_item() - atomic merge of repeated additions, validation
- update_item() - quantity change, removal at zero, ownership
- clear() - removes lines, keeps the cart
- Store failures on writes propagate
"""

from unittest.mock import AsyncMock, patch

import pytest

from exceptions.cart import CartNotFoundException, InvalidCartQuantityException
from exceptions.catalog import ProductNotFoundException
from exceptions.store import StoreUnavailableException
from repositories.cart import CartRepository
from repositories.cartItem import CartItemRepository
from services.cart import CartService, generate_cart_id


@pytest.fixture
def product(create_category, create_product):
    return create_product(price=1250, brand="Acme", category=create_category("shoes"))


@pytest.fixture
def other_product(create_product):
    return create_product(price=300, brand="Globex")


class TestGetOrCreate:

    @pytest.mark.asyncio
    async def test_missing_token_creates_cart(self, session):
        cart = await CartService.get_or_create(None, session)
        assert len(cart.id) == 32
        assert cart.items == []
        assert cart.subtotal == 0
        assert await CartRepository.exists(cart.id, session)

    @pytest.mark.asyncio
    async def test_unknown_token_creates_new_cart(self, session):
        cart = await CartService.get_or_create("f" * 32, session)
        assert cart.id != "f" * 32

    @pytest.mark.asyncio
    async def test_known_token_returns_same_cart(self, session):
        cart = await CartService.get_or_create(None, session)
        again = await CartService.get_or_create(cart.id, session)
        assert again.id == cart.id

    def test_tokens_are_unique(self):
        assert len({generate_cart_id() for _ in range(100)}) == 100


class TestAddItem:

    @pytest.mark.asyncio
    async def test_repeated_add_merges_into_one_line(self, session, product):
        cart = await CartService.get_or_create(None, session)

        await CartService.add_item(cart.id, product.id, 2, session)
        cart = await CartService.add_item(cart.id, product.id, 3, session)

        assert len(cart.items) == 1
        assert cart.items[0].quantity == 5
        assert cart.items[0].product.slug == product.slug
        assert cart.subtotal == 5 * 1250

        reloaded = await CartService.get_or_create(cart.id, session)
        assert [(item.product_id, item.quantity) for item in reloaded.items] == [(product.id, 5)]

    @pytest.mark.asyncio
    async def test_different_products_get_separate_lines(self, session, product, other_product):
        cart = await CartService.get_or_create(None, session)

        await CartService.add_item(cart.id, product.id, 1, session)
        cart = await CartService.add_item(cart.id, other_product.id, 4, session)

        assert [(item.product_id, item.quantity) for item in cart.items] == [(product.id, 1), (other_product.id, 4)]
        assert cart.subtotal == 1250 + 4 * 300

    @pytest.mark.asyncio
    async def test_unknown_product(self, session):
        cart = await CartService.get_or_create(None, session)
        with pytest.raises(ProductNotFoundException):
            await CartService.add_item(cart.id, 999, 1, session)

    @pytest.mark.asyncio
    async def test_unknown_cart(self, session, product):
        with pytest.raises(CartNotFoundException):
            await CartService.add_item("0" * 32, product.id, 1, session)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_non_positive_quantity(self, session, product, quantity):
        cart = await CartService.get_or_create(None, session)
        with pytest.raises(InvalidCartQuantityException):
            await CartService.add_item(cart.id, product.id, quantity, session)

    @pytest.mark.asyncio
    async def test_quantity_above_maximum(self, session, product):
        cart = await CartService.get_or_create(None, session)
        with patch("config.CART_QUANTITY_MAX", 10):
            with pytest.raises(InvalidCartQuantityException) as exc_info:
                await CartService.add_item(cart.id, product.id, 11, session)
        assert exc_info.value.maximum == 10

        cart = await CartService.get_or_create(cart.id, session)
        assert cart.items == []

    @pytest.mark.asyncio
    async def test_validate_item_checks_product(self, session, product):
        with pytest.raises(ProductNotFoundException):
            await CartService.validate_item(999, 1, session)
        await CartService.validate_item(product.id, 1, session)

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, session, product):
        cart = await CartService.get_or_create(None, session)
        failure = AsyncMock(side_effect=StoreUnavailableException("cart_item.upsert"))

        with patch.object(CartItemRepository, "upsert", failure):
            with pytest.raises(StoreUnavailableException):
                await CartService.add_item(cart.id, product.id, 1, session)

        cart = await CartService.get_or_create(cart.id, session)
        assert cart.items == []


class TestUpdateItem:

    @pytest.mark.asyncio
    async def test_update_quantity(self, session, product):
        cart = await CartService.get_or_create(None, session)
        cart = await CartService.add_item(cart.id, product.id, 2, session)

        item = await CartService.update_item(cart.items[0].id, 7, session)

        assert item.quantity == 7
        assert item.product.id == product.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -3])
    async def test_update_to_zero_removes_line(self, session, product, quantity):
        cart = await CartService.get_or_create(None, session)
        cart = await CartService.add_item(cart.id, product.id, 2, session)

        assert await CartService.update_item(cart.items[0].id, quantity, session) is None

        cart = await CartService.get_or_create(cart.id, session)
        assert cart.items == []

    @pytest.mark.asyncio
    async def test_update_above_maximum(self, session, product):
        cart = await CartService.get_or_create(None, session)
        cart = await CartService.add_item(cart.id, product.id, 2, session)

        with pytest.raises(InvalidCartQuantityException):
            await CartService.update_item(cart.items[0].id, 10 ** 20, session)

        cart = await CartService.get_or_create(cart.id, session)
        assert cart.items[0].quantity == 2

    @pytest.mark.asyncio
    async def test_update_unknown_line(self, session):
        assert await CartService.update_item(12345, 3, session) is None
        assert await CartService.update_item(12345, 0, session) is None

    @pytest.mark.asyncio
    async def test_line_of_another_cart_is_not_touched(self, session, product):
        owner = await CartService.get_or_create(None, session)
        owner = await CartService.add_item(owner.id, product.id, 2, session)
        intruder = await CartService.get_or_create(None, session)

        assert await CartService.update_item(owner.items[0].id, 0, session, cart_id=intruder.id) is None

        owner = await CartService.get_or_create(owner.id, session)
        assert owner.items[0].quantity == 2

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, session):
        failure = AsyncMock(side_effect=StoreUnavailableException("cart_item.update_quantity"))
        with patch.object(CartItemRepository, "update_quantity", failure):
            with pytest.raises(StoreUnavailableException):
                await CartService.update_item(1, 3, session)


class TestClear:

    @pytest.mark.asyncio
    async def test_clear_keeps_cart(self, session, product, other_product):
        cart = await CartService.get_or_create(None, session)
        await CartService.add_item(cart.id, product.id, 1, session)
        await CartService.add_item(cart.id, other_product.id, 1, session)

        await CartService.clear(cart.id, session)

        cleared = await CartService.get_or_create(cart.id, session)
        assert cleared.id == cart.id
        assert cleared.items == []
        assert cleared.subtotal == 0

    @pytest.mark.asyncio
    async def test_store_failure_propagates(self, session):
        failure = AsyncMock(side_effect=StoreUnavailableException("cart_item.delete_by_cart_id"))
        with patch.object(CartItemRepository, "delete_by_cart_id", failure):
            with pytest.raises(StoreUnavailableException):
                await CartService.clear("a" * 32, session)
