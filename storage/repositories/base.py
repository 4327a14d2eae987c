"""
基础Repository类
"""
# 标准库导包
from typing import TypeVar, Generic, Optional, List, Dict, Any, Iterable
from abc import ABC

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, delete, and_
from sqlalchemy.sql import func

# 项目内部导包
from storage.database import Base

# 泛型类型
ModelType = TypeVar('ModelType', bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """基础Repository类，提供通用的CRUD操作"""

    def __init__(self, session: AsyncSession, model: type[ModelType]):
        """
        初始化Repository

        Args:
            session: 数据库会话
            model: 数据库模型类
        """
        self.session = session
        self.model = model

    async def get_owned(self, id: str, user_id: str) -> Optional[ModelType]:
        """
        获取属于指定用户的单条记录

        Args:
            id: 记录ID
            user_id: 所属用户ID

        Returns:
            模型实例或None（不存在或不属于该用户）
        """
        result = await self.session.execute(
            select(self.model).where(
                and_(self.model.id == id, self.model.user_id == user_id)
            )
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs) -> ModelType:
        """
        创建新记录

        Args:
            **kwargs: 模型字段值

        Returns:
            创建的模型实例
        """
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def create_many(self, rows: Iterable[Dict[str, Any]]) -> List[ModelType]:
        """
        批量创建记录，一次flush写入

        Args:
            rows: 每条记录的字段值

        Returns:
            创建的模型实例列表
        """
        instances = [self.model(**row) for row in rows]
        if not instances:
            return []

        self.session.add_all(instances)
        await self.session.flush()
        return instances

    async def update_owned(self, id: str, user_id: str, **kwargs) -> Optional[ModelType]:
        """
        更新属于指定用户的记录

        Args:
            id: 记录ID
            user_id: 所属用户ID
            **kwargs: 要更新的字段值

        Returns:
            更新后的模型实例或None
        """
        # MySQL不支持RETURNING子句，所以先检查记录是否存在，再执行UPDATE
        existing = await self.get_owned(id, user_id)
        if not existing:
            return None

        await self.session.execute(
            update(self.model)
            .where(and_(self.model.id == id, self.model.user_id == user_id))
            .values(**kwargs)
        )

        # 刷新会话以获取最新数据
        await self.session.flush()
        await self.session.refresh(existing)

        return existing

    async def delete_owned(self, id: str, user_id: str) -> bool:
        """
        删除属于指定用户的记录

        Args:
            id: 记录ID
            user_id: 所属用户ID

        Returns:
            是否删除成功
        """
        result = await self.session.execute(
            delete(self.model).where(
                and_(self.model.id == id, self.model.user_id == user_id)
            )
        )
        return result.rowcount > 0

    async def count(self, **filters) -> int:
        """
        统计记录数量

        Args:
            **filters: 过滤条件

        Returns:
            记录数量
        """
        query = select(func.count(self.model.id))
        conditions = self._build_filter_conditions(filters)

        if conditions:
            query = query.where(and_(*conditions))

        result = await self.session.execute(query)
        return result.scalar_one()

    def _build_filter_conditions(self, filters: Dict[str, Any]) -> List:
        """
        构建过滤条件

        Args:
            filters: 过滤条件字典

        Returns:
            条件列表
        """
        conditions = []

        for key, value in filters.items():
            if not hasattr(self.model, key):
                continue

            column = getattr(self.model, key)

            if isinstance(value, (list, tuple, set)):
                # IN 条件
                conditions.append(column.in_(value))
            else:
                # 等于条件
                conditions.append(column == value)

        return conditions

    async def query_by_filters(
        self,
        filters: Dict[str, Any],
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        order_by: Optional[str] = None,
        order_desc: bool = True
    ) -> List[ModelType]:
        """
        根据过滤条件查询记录

        Args:
            filters: 过滤条件字典
            limit: 限制返回数量
            offset: 偏移量
            order_by: 排序字段
            order_desc: 是否降序

        Returns:
            模型实例列表
        """
        conditions = self._build_filter_conditions(filters)
        query = select(self.model)

        if conditions:
            query = query.where(and_(*conditions))

        if order_by and hasattr(self.model, order_by):
            column = getattr(self.model, order_by)
            if order_desc:
                query = query.order_by(column.desc())
            else:
                query = query.order_by(column.asc())

        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)

        result = await self.session.execute(query)
        return list(result.scalars().all())
