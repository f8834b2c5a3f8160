from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session

from db import session_execute, session_flush
from exceptions.store import StoreUnavailableException
from models.category import Category, CategoryDTO


class CategoryRepository:

    @staticmethod
    async def get_all(session: Session | AsyncSession) -> list[CategoryDTO]:
        stmt = select(Category).order_by(Category.name, Category.slug)
        try:
            categories = await session_execute(stmt, session)
            categories = categories.scalars().all()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("category.get_all", cause=e) from e
        return [CategoryDTO.model_validate(category, from_attributes=True) for category in categories]

    @staticmethod
    async def get_by_ids(category_ids: list[int], session: Session | AsyncSession) -> dict[int, CategoryDTO]:
        """
        Batch load categories for multiple ids (eliminates N+1 queries).

        Returns:
            Dict mapping category_id -> CategoryDTO
        """
        if not category_ids:
            return {}

        stmt = select(Category).where(Category.id.in_(category_ids))
        try:
            categories = await session_execute(stmt, session)
            categories = categories.scalars().all()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("category.get_by_ids", key=category_ids, cause=e) from e
        return {category.id: CategoryDTO.model_validate(category, from_attributes=True) for category in categories}

    @staticmethod
    async def get_by_slug(slug: str, session: Session | AsyncSession) -> CategoryDTO | None:
        stmt = select(Category).where(Category.slug == slug)
        try:
            category = await session_execute(stmt, session)
            category = category.scalar()
        except SQLAlchemyError as e:
            raise StoreUnavailableException("category.get_by_slug", key=slug, cause=e) from e
        if category is None:
            return None
        return CategoryDTO.model_validate(category, from_attributes=True)

    @staticmethod
    async def add_many(categories: list[CategoryDTO], session: Session | AsyncSession) -> list[CategoryDTO]:
        models = [Category(name=category.name, slug=category.slug) for category in categories]
        session.add_all(models)
        try:
            await session_flush(session)
        except SQLAlchemyError as e:
            raise StoreUnavailableException("category.add_many", key=len(categories), cause=e) from e
        return [CategoryDTO.model_validate(category, from_attributes=True) for category in models]
