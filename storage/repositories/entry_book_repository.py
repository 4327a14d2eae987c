"""
EntryBookRepository - 条目日记本关联Repository
"""
# 标准库导包
from typing import List

# 第三方库导包
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.models.entry_book import EntryBook
from storage.repositories.base import BaseRepository


class EntryBookRepository(BaseRepository[EntryBook]):
    """条目日记本关联Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, EntryBook)

    async def get_book_ids_by_entry_id(self, entry_id: str) -> List[str]:
        """
        根据条目ID获取所有日记本ID

        Args:
            entry_id: 条目ID

        Returns:
            日记本ID列表
        """
        query = select(EntryBook.book_id).where(EntryBook.entry_id == entry_id)
        result = await self.session.execute(query)
        return [row[0] for row in result.all()]

    async def add_books_to_entry(self, entry_id: str, book_ids: List[str]) -> List[EntryBook]:
        """
        批量为条目添加日记本关联，空列表时不写库

        Args:
            entry_id: 条目ID
            book_ids: 日记本ID列表

        Returns:
            新的关联列表
        """
        return await self.create_many(
            {"entry_id": entry_id, "book_id": book_id} for book_id in book_ids
        )

    async def delete_by_entry_id(self, entry_id: str) -> int:
        """
        删除指定条目的所有日记本关联

        Args:
            entry_id: 条目ID

        Returns:
            删除的关联数量
        """
        result = await self.session.execute(
            delete(EntryBook).where(EntryBook.entry_id == entry_id)
        )
        return result.rowcount
