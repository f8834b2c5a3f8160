from sqlalchemy import select, func, desc, ColumnElement
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, InstrumentedAttribute

from db import session_execute, session_scalar, session_flush
from exceptions.store import StoreUnavailableException
from models.product import Product, ProductDTO


class ProductRepository:

    @staticmethod
    async def get_by_slug(slug: str, session: Session | AsyncSession) -> ProductDTO | None:
        stmt = select(Product).where(Product.slug == slug)
        try:
            product = await session_execute(stmt, session)
            product = product.scalar()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.get_by_slug", key=slug, cause=e) from e
        if product is None:
            return None
        return ProductDTO.model_validate(product, from_attributes=True)

    @staticmethod
    async def get_by_id(product_id: int, session: Session | AsyncSession) -> ProductDTO | None:
        stmt = select(Product).where(Product.id == product_id)
        try:
            product = await session_execute(stmt, session)
            product = product.scalar()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.get_by_id", key=product_id, cause=e) from e
        if product is None:
            return None
        return ProductDTO.model_validate(product, from_attributes=True)

    @staticmethod
    async def count(predicate: ColumnElement[bool], session: Session | AsyncSession) -> int:
        stmt = select(func.count()).select_from(Product).where(predicate)
        try:
            return await session_scalar(stmt, session) or 0
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.count", cause=e) from e

    @staticmethod
    async def find_many(predicate: ColumnElement[bool],
                        offset: int,
                        limit: int,
                        session: Session | AsyncSession) -> list[ProductDTO]:
        """
        Returns one slice of matching products, newest first.

        The id is the tie-breaker for products created within the same clock tick,
        so consecutive slices never overlap or skip rows.
        """
        stmt = (select(Product)
                .where(predicate)
                .order_by(desc(Product.created_at), desc(Product.id))
                .offset(offset)
                .limit(limit))
        try:
            products = await session_execute(stmt, session)
            products = products.scalars().all()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.find_many", key=f"offset={offset},limit={limit}", cause=e) from e
        return [ProductDTO.model_validate(product, from_attributes=True) for product in products]

    @staticmethod
    async def get_distinct_values(column: InstrumentedAttribute,
                                  predicate: ColumnElement[bool],
                                  session: Session | AsyncSession) -> list[str]:
        stmt = (select(column)
                .where(predicate, column.is_not(None), column != "")
                .distinct()
                .order_by(column))
        try:
            rows = await session_execute(stmt, session)
            return [value for value in rows.scalars().all()]
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.get_distinct_values", key=column.key, cause=e) from e

    @staticmethod
    async def count_by_value(column: InstrumentedAttribute,
                             predicate: ColumnElement[bool],
                             session: Session | AsyncSession) -> dict[str, int]:
        stmt = (select(column, func.count(Product.id))
                .where(predicate, column.is_not(None), column != "")
                .group_by(column))
        try:
            rows = await session_execute(stmt, session)
            return {value: count for value, count in rows.all()}
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.count_by_value", key=column.key, cause=e) from e

    @staticmethod
    async def get_distinct_category_ids(predicate: ColumnElement[bool],
                                        session: Session | AsyncSession) -> list[int]:
        stmt = (select(Product.category_id)
                .where(predicate, Product.category_id.is_not(None))
                .distinct())
        try:
            rows = await session_execute(stmt, session)
            return list(rows.scalars().all())
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.get_distinct_category_ids", cause=e) from e

    @staticmethod
    async def count_by_category(predicate: ColumnElement[bool],
                                session: Session | AsyncSession) -> dict[int, int]:
        """Tallies matching products per category id; uncategorized products are skipped."""
        stmt = (select(Product.category_id, func.count(Product.id))
                .where(predicate, Product.category_id.is_not(None))
                .group_by(Product.category_id))
        try:
            rows = await session_execute(stmt, session)
            return {category_id: count for category_id, count in rows.all()}
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.count_by_category", cause=e) from e

    @staticmethod
    async def get_price_range(predicate: ColumnElement[bool],
                              session: Session | AsyncSession) -> tuple[int, int] | None:
        stmt = select(func.min(Product.price), func.max(Product.price)).where(predicate)
        try:
            rows = await session_execute(stmt, session)
            lowest, highest = rows.one()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.get_price_range", cause=e) from e
        if lowest is None:
            return None
        return lowest, highest

    @staticmethod
    async def add_many(products: list[ProductDTO], session: Session | AsyncSession) -> list[int]:
        models = []
        for product_dto in products:
            product = Product(**product_dto.model_dump(exclude={'id', 'category', 'created_at'}, exclude_none=True))
            if product_dto.created_at is not None:
                product.created_at = product_dto.created_at
            session.add(product)
            models.append(product)
        try:
            await session_flush(session)
        except SQLAlchemyError as e:
            raise StoreUnavailableException("product.add_many", key=len(products), cause=e) from e
        return [product.id for product in models]

