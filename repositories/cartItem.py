from sqlalchemy import select, update, delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_dialect_name
from exceptions.store import StoreUnavailableException
from models.cartItem import CartItem, CartItemDTO

UPSERT_DIALECTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


class CartItemRepository:

    @staticmethod
    async def get_by_cart_id(cart_id: str, session: AsyncSession | Session) -> list[CartItemDTO]:
        stmt = select(CartItem).where(CartItem.cart_id == cart_id).order_by(CartItem.id)
        stmt = stmt.execution_options(populate_existing=True)
        try:
            cart_items = await session_execute(stmt, session)
            cart_items = cart_items.scalars().all()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart_item.get_by_cart_id", key=cart_id, cause=e) from e
        return [CartItemDTO.model_validate(cart_item, from_attributes=True) for cart_item in cart_items]

    @staticmethod
    async def get_by_id(cart_item_id: int, session: AsyncSession | Session) -> CartItemDTO | None:
        stmt = select(CartItem).where(CartItem.id == cart_item_id)
        stmt = stmt.execution_options(populate_existing=True)
        try:
            cart_item = await session_execute(stmt, session)
            cart_item = cart_item.scalar()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart_item.get_by_id", key=cart_item_id, cause=e) from e
        if cart_item is None:
            return None
        return CartItemDTO.model_validate(cart_item, from_attributes=True)

    @staticmethod
    async def upsert(cart_id: str, product_id: int, quantity: int, session: AsyncSession | Session) -> None:
        """
        Adds quantity to the (cart, product) line, creating the line if missing.

        Runs as one INSERT ... ON CONFLICT DO UPDATE so two concurrent additions
        of the same product cannot lose an increment.
        """
        dialect = session_dialect_name(session)
        insert = UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Atomic cart upsert is not supported for dialect '{dialect}'")

        stmt = insert(CartItem).values(cart_id=cart_id, product_id=product_id, quantity=quantity)
        stmt = stmt.on_conflict_do_update(
            index_elements=[CartItem.cart_id, CartItem.product_id],
            set_={"quantity": CartItem.quantity + stmt.excluded.quantity}
        )
        try:
            await session_execute(stmt, session)
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart_item.upsert", key=f"{cart_id}/{product_id}", cause=e) from e

    @staticmethod
    async def update_quantity(cart_item_id: int, quantity: int, session: AsyncSession | Session) -> bool:
        stmt = update(CartItem).where(CartItem.id == cart_item_id).values(quantity=quantity)
        try:
            result = await session_execute(stmt, session)
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart_item.update_quantity", key=cart_item_id, cause=e) from e
        return result.rowcount > 0

    @staticmethod
    async def remove_from_cart(cart_item_id: int, session: AsyncSession | Session) -> bool:
        stmt = delete(CartItem).where(CartItem.id == cart_item_id)
        try:
            result = await session_execute(stmt, session)
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart_item.remove_from_cart", key=cart_item_id, cause=e) from e
        return result.rowcount > 0

    @staticmethod
    async def delete_by_cart_id(cart_id: str, session: AsyncSession | Session) -> int:
        stmt = delete(CartItem).where(CartItem.cart_id == cart_id)
        try:
            result = await session_execute(stmt, session)
        except SQLAlchemyError as e:
            raise StoreUnavailableException("cart_item.delete_by_cart_id", key=cart_id, cause=e) from e
        return result.rowcount
