"""
EntryRepository - 日记条目Repository
"""
# 标准库导包
from typing import List

# 第三方库导包
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

# 项目内部导包
from storage.models.entry import Entry
from storage.models.entry_book import EntryBook
from storage.models.entry_tag import EntryTag
from storage.repositories.base import BaseRepository


class EntryRepository(BaseRepository[Entry]):
    """日记条目Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Entry)

    async def get_hydrated_by_user_id(self, user_id: str) -> List[Entry]:
        """
        获取用户的所有条目，并一次性加载关联的日记本和标签

        通过selectinload按关联表批量加载，查询次数与条目数量无关。

        Args:
            user_id: 用户ID

        Returns:
            条目列表（按创建时间倒序），book_links/tag_links已加载
        """
        query = (
            select(Entry)
            .where(Entry.user_id == user_id)
            .options(
                selectinload(Entry.book_links).selectinload(EntryBook.book),
                selectinload(Entry.tag_links).selectinload(EntryTag.tag),
            )
            .order_by(Entry.created_at.desc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())
