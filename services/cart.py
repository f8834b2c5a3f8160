import logging
import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

import config
from db import session_commit, session_rollback
from exceptions.cart import CartNotFoundException, InvalidCartQuantityException
from exceptions.catalog import ProductNotFoundException
from exceptions.store import StoreUnavailableException
from models.cart import CartDTO
from models.cartItem import CartItemDTO
from repositories.cart import CartRepository
from repositories.cartItem import CartItemRepository
from repositories.product import ProductRepository

logger = logging.getLogger(__name__)


def generate_cart_id() -> str:
    """Opaque, unguessable session token that doubles as the cart's primary key."""
    return uuid.uuid4().hex


class CartService:
    """
    Session-bound shopping cart.

    Reads return None for unknown identifiers. Writes roll back and propagate
    every store failure.
    """

    @staticmethod
    async def get_or_create(cart_id: str | None, session: AsyncSession | Session) -> CartDTO:
        """
        Returns the cart for a session token, creating a fresh empty cart when
        the token is missing or unknown. The returned id is the token to hand
        back to the client.
        """
        if cart_id:
            cart = await CartRepository.get_by_id(cart_id, session)
            if cart is not None:
                return cart

        new_cart_id = generate_cart_id()
        try:
            cart = await CartRepository.create(new_cart_id, session)
            await session_commit(session)
        except StoreUnavailableException:
            await session_rollback(session)
            raise
        logger.info(f"[Cart] Created cart {new_cart_id}")
        return cart

    @staticmethod
    async def validate_item(product_id: int, quantity: int, session: AsyncSession | Session) -> None:
        """
        Checks an add request before any cart is touched.

        Raises:
            InvalidCartQuantityException: quantity is not positive or above CART_QUANTITY_MAX
            ProductNotFoundException: product id unknown
        """
        if quantity <= 0:
            raise InvalidCartQuantityException(quantity)
        if quantity > config.CART_QUANTITY_MAX:
            raise InvalidCartQuantityException(quantity, config.CART_QUANTITY_MAX)
        if await ProductRepository.get_by_id(product_id, session) is None:
            raise ProductNotFoundException(product_id=product_id)

    @staticmethod
    async def add_item(cart_id: str, product_id: int, quantity: int,
                       session: AsyncSession | Session) -> CartDTO:
        """
        Adds a product to the cart.

        Adding a product that is already in the cart increments that line's
        quantity in a single atomic upsert instead of creating a second line.

        Raises:
            InvalidCartQuantityException: quantity is not positive or above CART_QUANTITY_MAX
            CartNotFoundException: cart token unknown
            ProductNotFoundException: product id unknown
            StoreUnavailableException: the write failed
        """
        await CartService.validate_item(product_id, quantity, session)
        if not await CartRepository.exists(cart_id, session):
            raise CartNotFoundException(cart_id)

        try:
            await CartItemRepository.upsert(cart_id, product_id, quantity, session)
            await session_commit(session)
        except StoreUnavailableException:
            logger.error(f"[Cart] Failed to add product {product_id} x{quantity} to cart {cart_id}")
            await session_rollback(session)
            raise

        logger.info(f"[Cart] Added product {product_id} x{quantity} to cart {cart_id}")
        return await CartRepository.get_by_id(cart_id, session)

    @staticmethod
    async def update_item(cart_item_id: int, quantity: int,
                          session: AsyncSession | Session,
                          cart_id: str | None = None) -> CartItemDTO | None:
        """
        Sets a cart line's quantity. A quantity of zero or less removes the line.
        Quantities above CART_QUANTITY_MAX raise InvalidCartQuantityException.

        When cart_id is given, a line belonging to another cart is treated as
        missing.

        Returns:
            The updated line, or None when it was removed or does not exist
        """
        if quantity > config.CART_QUANTITY_MAX:
            raise InvalidCartQuantityException(quantity, config.CART_QUANTITY_MAX)
        if cart_id is not None:
            existing = await CartItemRepository.get_by_id(cart_item_id, session)
            if existing is None or existing.cart_id != cart_id:
                return None

        try:
            if quantity <= 0:
                removed = await CartItemRepository.remove_from_cart(cart_item_id, session)
                await session_commit(session)
                if removed:
                    logger.info(f"[Cart] Removed cart item {cart_item_id}")
                return None

            updated = await CartItemRepository.update_quantity(cart_item_id, quantity, session)
            await session_commit(session)
        except StoreUnavailableException:
            logger.error(f"[Cart] Failed to update cart item {cart_item_id} to quantity {quantity}")
            await session_rollback(session)
            raise

        if not updated:
            return None
        return await CartItemRepository.get_by_id(cart_item_id, session)

    @staticmethod
    async def clear(cart_id: str, session: AsyncSession | Session) -> None:
        """Removes every line of the cart; the cart itself (and its token) stays valid."""
        try:
            removed = await CartItemRepository.delete_by_cart_id(cart_id, session)
            await session_commit(session)
        except StoreUnavailableException:
            logger.error(f"[Cart] Failed to clear cart {cart_id}")
            await session_rollback(session)
            raise
        logger.info(f"[Cart] Cleared cart {cart_id} ({removed} items)")
