"""
BookRepository - 日记本Repository
"""
# 标准库导包
from typing import List, Iterable

# 第三方库导包
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.models.book import Book
from storage.repositories.base import BaseRepository


class BookRepository(BaseRepository[Book]):
    """日记本Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Book)

    async def get_by_user_id(self, user_id: str) -> List[Book]:
        """
        获取用户的所有日记本，按创建时间升序

        Args:
            user_id: 用户ID

        Returns:
            日记本列表
        """
        return await self.query_by_filters(
            filters={"user_id": user_id},
            order_by="created_at",
            order_desc=False
        )

    async def get_owned_ids(self, user_id: str, book_ids: Iterable[str]) -> set:
        """
        从给定ID中筛出属于该用户的日记本ID

        Args:
            user_id: 用户ID
            book_ids: 待校验的日记本ID

        Returns:
            属于该用户的日记本ID集合
        """
        book_ids = list(book_ids)
        if not book_ids:
            return set()

        result = await self.session.execute(
            select(Book.id).where(and_(Book.user_id == user_id, Book.id.in_(book_ids)))
        )
        return {row[0] for row in result.all()}
