"""
TagRepository - 标签Repository
"""
# 标准库导包
from typing import List, Iterable

# 第三方库导包
from sqlalchemy import select, and_, func
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from storage.models.tag import Tag
from storage.repositories.base import BaseRepository


class TagRepository(BaseRepository[Tag]):
    """标签Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Tag)

    async def get_by_user_id(self, user_id: str) -> List[Tag]:
        """
        获取用户的所有标签，按名称字母序（不区分大小写）

        Args:
            user_id: 用户ID

        Returns:
            标签列表
        """
        query = (
            select(Tag)
            .where(Tag.user_id == user_id)
            .order_by(func.lower(Tag.name).asc(), Tag.name.asc(), Tag.created_at.asc())
        )
        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def get_owned_ids(self, user_id: str, tag_ids: Iterable[str]) -> set:
        """
        从给定ID中筛出属于该用户的标签ID

        Args:
            user_id: 用户ID
            tag_ids: 待校验的标签ID

        Returns:
            属于该用户的标签ID集合
        """
        tag_ids = list(tag_ids)
        if not tag_ids:
            return set()

        result = await self.session.execute(
            select(Tag.id).where(and_(Tag.user_id == user_id, Tag.id.in_(tag_ids)))
        )
        return {row[0] for row in result.all()}
