"""
日记服务类
处理日记本、标签、条目及其关联的读写，调用方负责事务边界
"""
# 标准库导包
import logging
from typing import Optional, List

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession

# 项目内部导包
from models import BookResponse, TagResponse, EntryResponse
from storage.models.book import Book
from storage.models.entry import Entry
from storage.models.tag import Tag
from storage.repositories.book_repository import BookRepository
from storage.repositories.entry_book_repository import EntryBookRepository
from storage.repositories.entry_repository import EntryRepository
from storage.repositories.entry_tag_repository import EntryTagRepository
from storage.repositories.tag_repository import TagRepository

# 配置日志
logger = logging.getLogger(__name__)

DISPLAY_DATE_FORMAT = "%d/%m/%Y"


class DiaryOperationError(Exception):
    """日记后端操作失败"""


def book_to_response(book: Book) -> BookResponse:
    return BookResponse(
        id=book.id,
        name=book.name,
        description=book.description or "",
        created_at=book.created_at
    )


def tag_to_response(tag: Tag) -> TagResponse:
    return TagResponse(id=tag.id, name=tag.name)


def entry_to_response(entry: Entry) -> EntryResponse:
    """
    将已加载关联的Entry转换为EntryResponse

    关联目标已不存在的链接行直接跳过。

    Args:
        entry: book_links/tag_links已加载的Entry实例

    Returns:
        EntryResponse对象
    """
    books = [book_to_response(link.book) for link in entry.book_links if link.book is not None]
    tags = [tag_to_response(link.tag) for link in entry.tag_links if link.tag is not None]

    return EntryResponse(
        id=entry.id,
        title=entry.title,
        content=entry.content,
        created_at=entry.created_at,
        updated_at=entry.updated_at,
        display_date=entry.created_at.strftime(DISPLAY_DATE_FORMAT),
        books=books,
        tags=tags
    )


def _unique(ids: List[str]) -> List[str]:
    # 去重并保持选择顺序
    return list(dict.fromkeys(ids))


class DiaryService:
    """日记服务类"""

    def __init__(self, session: AsyncSession):
        """
        初始化日记服务

        Args:
            session: 数据库会话
        """
        self.session = session
        self.book_repo = BookRepository(session)
        self.tag_repo = TagRepository(session)
        self.entry_repo = EntryRepository(session)
        self.entry_book_repo = EntryBookRepository(session)
        self.entry_tag_repo = EntryTagRepository(session)

    async def list_books(self, user_id: str) -> List[BookResponse]:
        """获取用户的日记本，按创建时间升序"""
        books = await self.book_repo.get_by_user_id(user_id)
        return [book_to_response(book) for book in books]

    async def list_tags(self, user_id: str) -> List[TagResponse]:
        """获取用户的标签，按名称排序"""
        tags = await self.tag_repo.get_by_user_id(user_id)
        return [tag_to_response(tag) for tag in tags]

    async def list_entries(self, user_id: str) -> List[EntryResponse]:
        """获取用户的条目（含日记本和标签），按创建时间倒序"""
        entries = await self.entry_repo.get_hydrated_by_user_id(user_id)
        return [entry_to_response(entry) for entry in entries]

    async def create_book(self, user_id: str, name: str, description: str = "") -> Book:
        """
        创建日记本

        Args:
            user_id: 所属用户ID
            name: 名称
            description: 描述

        Returns:
            创建的Book实例
        """
        book = await self.book_repo.create(
            user_id=user_id,
            name=name.strip(),
            description=(description or "").strip()
        )
        logger.info(f"创建日记本成功: book_id={book.id}, user_id={user_id}")
        return book

    async def delete_book(self, user_id: str, book_id: str):
        """
        删除日记本，条目上的关联由外键级联清理

        Raises:
            DiaryOperationError: 日记本不存在或不属于该用户
        """
        deleted = await self.book_repo.delete_owned(book_id, user_id)
        if not deleted:
            raise DiaryOperationError(f"日记本不存在: book_id={book_id}")
        logger.info(f"删除日记本成功: book_id={book_id}, user_id={user_id}")

    async def create_tag(self, user_id: str, name: str) -> Tag:
        """
        创建标签

        Args:
            user_id: 所属用户ID
            name: 标签名称

        Returns:
            创建的Tag实例
        """
        tag = await self.tag_repo.create(user_id=user_id, name=name.strip())
        logger.info(f"创建标签成功: tag_id={tag.id}, user_id={user_id}")
        return tag

    async def save_entry(
        self,
        user_id: str,
        title: str,
        content: str,
        book_ids: List[str],
        tag_ids: List[str],
        editing_entry_id: Optional[str] = None
    ) -> str:
        """
        保存条目并整体替换其日记本/标签关联

        更新时先改标题和正文，再删除该条目的全部关联行；新建时插入条目取得ID。
        之后按选择批量插入关联行，选择为空则跳过。

        Args:
            user_id: 所属用户ID
            title: 标题
            content: 正文
            book_ids: 选择的日记本ID
            tag_ids: 选择的标签ID
            editing_entry_id: 正在编辑的条目ID，为None时新建

        Returns:
            条目ID

        Raises:
            DiaryOperationError: 条目不存在，或选择了不属于该用户的日记本/标签
        """
        book_ids = _unique(book_ids)
        tag_ids = _unique(tag_ids)

        await self._check_ownership(user_id, book_ids, tag_ids)

        if editing_entry_id:
            entry = await self.entry_repo.update_owned(
                editing_entry_id,
                user_id,
                title=title,
                content=content
            )
            if not entry:
                raise DiaryOperationError(f"条目不存在: entry_id={editing_entry_id}")

            await self.entry_book_repo.delete_by_entry_id(entry.id)
            await self.entry_tag_repo.delete_by_entry_id(entry.id)
        else:
            entry = await self.entry_repo.create(user_id=user_id, title=title, content=content)

        await self.entry_book_repo.add_books_to_entry(entry.id, book_ids)
        await self.entry_tag_repo.add_tags_to_entry(entry.id, tag_ids)

        logger.info(
            f"保存条目成功: entry_id={entry.id}, user_id={user_id}, "
            f"books={len(book_ids)}, tags={len(tag_ids)}, updated={bool(editing_entry_id)}"
        )
        return entry.id

    async def delete_entry(self, user_id: str, entry_id: str):
        """
        删除条目，关联行由外键级联删除

        Raises:
            DiaryOperationError: 条目不存在或不属于该用户
        """
        deleted = await self.entry_repo.delete_owned(entry_id, user_id)
        if not deleted:
            raise DiaryOperationError(f"条目不存在: entry_id={entry_id}")
        logger.info(f"删除条目成功: entry_id={entry_id}, user_id={user_id}")

    async def _check_ownership(self, user_id: str, book_ids: List[str], tag_ids: List[str]):
        owned_books = await self.book_repo.get_owned_ids(user_id, book_ids)
        missing_books = [book_id for book_id in book_ids if book_id not in owned_books]
        if missing_books:
            raise DiaryOperationError(f"日记本不存在: {missing_books}")

        owned_tags = await self.tag_repo.get_owned_ids(user_id, tag_ids)
        missing_tags = [tag_id for tag_id in tag_ids if tag_id not in owned_tags]
        if missing_tags:
            raise DiaryOperationError(f"标签不存在: {missing_tags}")
