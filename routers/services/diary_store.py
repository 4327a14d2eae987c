"""
DiaryStore
当前用户的日记本、标签、条目在内存中的投影，所有写操作完成后重新加载受影响的集合
"""
# 标准库导包
import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, TypeVar

# 第三方库导包
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# 项目内部导包
from models import AuthContext, BookResponse, TagResponse, EntryResponse
from routers.services.auth_service import AuthState
from routers.services.diary_service import DiaryService, DiaryOperationError

# 配置日志
logger = logging.getLogger(__name__)

T = TypeVar("T")


class DiaryStore:
    """
    日记数据仓库

    每个操作使用独立的会话：读操作只查询，写操作在一个事务内完成，
    失败时回滚、记录日志并返回，不向调用方抛出异常，内存中的集合保持不变。
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        auth_context: Optional[AuthContext] = None
    ):
        """
        初始化DiaryStore

        Args:
            session_factory: 数据库会话工厂
            auth_context: 当前用户，为None时为未登录的只读空视图
        """
        self.session_factory = session_factory
        self.auth_context = auth_context
        self.books: List[BookResponse] = []
        self.tags: List[TagResponse] = []
        self.entries: List[EntryResponse] = []

    @property
    def owner_id(self) -> Optional[str]:
        return self.auth_context.user_id if self.auth_context else None

    # ========== 登录状态 ==========

    async def set_auth_context(self, auth_context: Optional[AuthContext]):
        """
        切换当前用户：登出时清空所有集合，登录后重新加载

        Args:
            auth_context: 新的用户身份或None
        """
        self.auth_context = auth_context
        self.books, self.tags, self.entries = [], [], []

        if auth_context is not None:
            await self.load_all()

    def observe(self, auth_state: AuthState) -> Callable[[], None]:
        """
        订阅登录状态变化

        Returns:
            取消订阅的函数
        """
        return auth_state.subscribe(self.set_auth_context)

    # ========== 读操作 ==========

    async def load_books(self) -> bool:
        books = await self._read("加载日记本", lambda service: service.list_books(self.owner_id))
        if books is None:
            return False
        self.books = books
        return True

    async def load_tags(self) -> bool:
        tags = await self._read("加载标签", lambda service: service.list_tags(self.owner_id))
        if tags is None:
            return False
        self.tags = tags
        return True

    async def load_entries(self) -> bool:
        entries = await self._read("加载条目", lambda service: service.list_entries(self.owner_id))
        if entries is None:
            return False
        self.entries = entries
        return True

    async def load_all(self):
        """并发加载三个集合，彼此之间无顺序保证"""
        await asyncio.gather(self.load_books(), self.load_tags(), self.load_entries())

    # ========== 写操作 ==========

    async def add_book(self, name: str, description: str = "") -> bool:
        """
        新建日记本，名称为空或未登录时不做任何事

        Returns:
            是否创建成功
        """
        if not name or not name.strip() or self.owner_id is None:
            return False

        book = await self._write(
            "添加日记本",
            lambda service: service.create_book(self.owner_id, name, description)
        )
        if book is None:
            return False

        await self.load_books()
        return True

    async def delete_book(self, book_id: str) -> bool:
        """删除日记本，成功后同时重新加载日记本和条目"""
        if self.owner_id is None:
            return False

        deleted = await self._write(
            "删除日记本",
            lambda service: self._returning_true(service.delete_book(self.owner_id, book_id))
        )
        if not deleted:
            return False

        await self.load_books()
        await self.load_entries()
        return True

    async def add_tag(self, name: str) -> bool:
        """新建标签，名称为空或未登录时不做任何事"""
        if not name or not name.strip() or self.owner_id is None:
            return False

        tag = await self._write("添加标签", lambda service: service.create_tag(self.owner_id, name))
        if tag is None:
            return False

        await self.load_tags()
        return True

    async def save_entry(
        self,
        title: str,
        content: str,
        selected_book_ids: List[str],
        selected_tag_ids: List[str],
        editing_entry_id: Optional[str] = None
    ) -> Optional[str]:
        """
        保存条目（新建或整体更新）并重新加载条目

        标题、正文为空，未选择日记本，或未登录时直接返回。
        条目写入与关联替换在同一事务内，任一步失败全部回滚。

        Args:
            title: 标题
            content: 正文
            selected_book_ids: 选择的日记本ID，至少一个
            selected_tag_ids: 选择的标签ID
            editing_entry_id: 正在编辑的条目ID

        Returns:
            条目ID，未保存时为None
        """
        if not title or not content or not selected_book_ids or self.owner_id is None:
            return None

        entry_id = await self._write(
            "保存条目",
            lambda service: service.save_entry(
                self.owner_id,
                title,
                content,
                list(selected_book_ids),
                list(selected_tag_ids or []),
                editing_entry_id
            )
        )
        if entry_id is None:
            return None

        await self.load_entries()
        return entry_id

    async def delete_entry(self, entry_id: str) -> bool:
        """删除条目并重新加载条目"""
        if self.owner_id is None:
            return False

        deleted = await self._write(
            "删除条目",
            lambda service: self._returning_true(service.delete_entry(self.owner_id, entry_id))
        )
        if not deleted:
            return False

        await self.load_entries()
        return True

    def find_entry(self, entry_id: str) -> Optional[EntryResponse]:
        """在已加载的条目中查找"""
        for entry in self.entries:
            if entry.id == entry_id:
                return entry
        return None

    # ========== 内部方法 ==========

    async def _read(self, operation: str, action: Callable[[DiaryService], Awaitable[T]]) -> Optional[T]:
        if self.owner_id is None:
            return None

        try:
            async with self.session_factory() as session:
                return await action(DiaryService(session))
        except (SQLAlchemyError, DiaryOperationError) as e:
            logger.error(f"{operation}失败: user_id={self.owner_id}, error={str(e)}")
            return None

    async def _write(self, operation: str, action: Callable[[DiaryService], Awaitable[T]]) -> Optional[T]:
        try:
            async with self.session_factory() as session:
                async with session.begin():
                    return await action(DiaryService(session))
        except (SQLAlchemyError, DiaryOperationError) as e:
            logger.error(f"{operation}失败: user_id={self.owner_id}, error={str(e)}")
            return None

    @staticmethod
    async def _returning_true(awaitable: Awaitable[None]) -> bool:
        await awaitable
        return True
