from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from exceptions.store import StoreUnavailableException
from models.cart import Cart, CartDTO
from repositories.cartItem import CartItemRepository


class CartRepository:

    @staticmethod
    async def exists(cart_id: str, session: AsyncSession | Session) -> bool:
        stmt = select(Cart.id).where(Cart.id == cart_id)
        try:
            cart = await session_execute(stmt, session)
            return cart.scalar() is not None
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart.exists", key=cart_id, cause=e) from e

    @staticmethod
    async def create(cart_id: str, session: AsyncSession | Session) -> CartDTO:
        cart = Cart(id=cart_id)
        session.add(cart)
        try:
            await session_flush(session)
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart.create", key=cart_id, cause=e) from e
        return CartDTO(id=cart_id)

    @staticmethod
    async def get_by_id(cart_id: str, session: AsyncSession | Session) -> CartDTO | None:
        stmt = select(Cart.id, Cart.created_at).where(Cart.id == cart_id)
        try:
            cart = await session_execute(stmt, session)
            cart = cart.one_or_none()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart.get_by_id", key=cart_id, cause=e) from e
        if cart is None:
            return None
        items = await CartItemRepository.get_by_cart_id(cart_id, session)
        return CartDTO(
            id=cart.id,
            created_at=cart.created_at,
            items=items,
            subtotal=sum(item.line_total for item in items)
        )
