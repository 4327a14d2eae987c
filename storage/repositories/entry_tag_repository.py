"""
EntryTagRepository - 条目标签关联Repository
"""
# 标准库导包
from typing import List

# 第三方库导包
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

# 项目内部导包
from storage.models.entry_tag import EntryTag
from storage.models.tag import Tag
from storage.repositories.base import BaseRepository


class EntryTagRepository(BaseRepository[EntryTag]):
    """条目标签关联Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, EntryTag)

    async def get_tags_by_entry_id(self, entry_id: str) -> List[Tag]:
        """
        根据条目ID获取所有标签

        Args:
            entry_id: 条目ID

        Returns:
            标签列表
        """
        query = select(EntryTag).where(
            EntryTag.entry_id == entry_id
        ).options(selectinload(EntryTag.tag))

        result = await self.session.execute(query)
        entry_tags = list(result.scalars().all())

        return [et.tag for et in entry_tags if et.tag]

    async def add_tags_to_entry(self, entry_id: str, tag_ids: List[str]) -> List[EntryTag]:
        """
        批量为条目添加标签关联，空列表时不写库

        Args:
            entry_id: 条目ID
            tag_ids: 标签ID列表

        Returns:
            新的关联列表
        """
        return await self.create_many(
            {"entry_id": entry_id, "tag_id": tag_id} for tag_id in tag_ids
        )

    async def delete_by_entry_id(self, entry_id: str) -> int:
        """
        删除指定条目的所有标签关联

        Args:
            entry_id: 条目ID

        Returns:
            删除的关联数量
        """
        result = await self.session.execute(
            delete(EntryTag).where(EntryTag.entry_id == entry_id)
        )
        return result.rowcount
