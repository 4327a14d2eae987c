"""
日记路由
提供日记本、标签、条目的查询与增删改接口
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

# 项目内部导包
from models import (
    ALL_BOOKS,
    AuthContext,
    BookListResponse,
    TagListResponse,
    EntryListResponse,
    SaveEntryResponse,
    CreateBookRequest,
    CreateTagRequest,
    SaveEntryRequest
)
from storage.database import get_session_factory
from routers.services.diary_store import DiaryStore
from routers.services.view_state import filter_entries
from utils import get_auth_context

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/diary",
    tags=["日记本"]
)


async def get_diary_store(
    auth_context: Optional[AuthContext] = Depends(get_auth_context),
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory)
) -> DiaryStore:
    """
    为当前请求创建DiaryStore

    Args:
        auth_context: 当前用户，未登录时为None
        session_factory: 数据库会话工厂

    Returns:
        DiaryStore实例（尚未加载任何集合）
    """
    return DiaryStore(session_factory, auth_context)


def _books_response(store: DiaryStore, success: bool = True, message: str = "获取成功") -> BookListResponse:
    return BookListResponse(success=success, message=message, data=store.books, total=len(store.books))


def _tags_response(store: DiaryStore, success: bool = True, message: str = "获取成功") -> TagListResponse:
    return TagListResponse(success=success, message=message, data=store.tags, total=len(store.tags))


def _entries_response(store: DiaryStore, success: bool = True, message: str = "获取成功") -> EntryListResponse:
    return EntryListResponse(success=success, message=message, data=store.entries, total=len(store.entries))


@router.get("/books", response_model=BookListResponse, summary="获取日记本列表")
async def get_books(store: DiaryStore = Depends(get_diary_store)):
    """获取当前用户的日记本，按创建时间升序；未登录时返回空列表"""
    try:
        await store.load_books()
        return _books_response(store)

    except Exception as e:
        logger.error(f"获取日记本列表失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"获取日记本列表失败: {str(e)}")


@router.post("/books", response_model=BookListResponse, summary="新建日记本")
async def add_book(
    request: CreateBookRequest,
    store: DiaryStore = Depends(get_diary_store)
):
    """
    新建日记本并返回重新加载后的列表

    名称为空或未登录时不做任何事，success为False
    """
    try:
        added = await store.add_book(request.name, request.description)
        if not added:
            await store.load_books()
            return _books_response(store, success=False, message="未创建")

        return _books_response(store, message="创建成功")

    except Exception as e:
        logger.error(f"新建日记本失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"新建日记本失败: {str(e)}")


@router.delete("/books/{book_id}", response_model=BookListResponse, summary="删除日记本")
async def delete_book(
    book_id: str,
    store: DiaryStore = Depends(get_diary_store)
):
    """删除日记本，条目本身保留，仅移除与该日记本的关联"""
    try:
        deleted = await store.delete_book(book_id)
        if not deleted:
            await store.load_books()
            return _books_response(store, success=False, message="未删除")

        return _books_response(store, message="删除成功")

    except Exception as e:
        logger.error(f"删除日记本失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"删除日记本失败: {str(e)}")


@router.get("/tags", response_model=TagListResponse, summary="获取标签列表")
async def get_tags(store: DiaryStore = Depends(get_diary_store)):
    """获取当前用户的标签，按名称排序"""
    try:
        await store.load_tags()
        return _tags_response(store)

    except Exception as e:
        logger.error(f"获取标签列表失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"获取标签列表失败: {str(e)}")


@router.post("/tags", response_model=TagListResponse, summary="新建标签")
async def add_tag(
    request: CreateTagRequest,
    store: DiaryStore = Depends(get_diary_store)
):
    """新建标签并返回重新加载后的列表"""
    try:
        added = await store.add_tag(request.name)
        if not added:
            await store.load_tags()
            return _tags_response(store, success=False, message="未创建")

        return _tags_response(store, message="创建成功")

    except Exception as e:
        logger.error(f"新建标签失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"新建标签失败: {str(e)}")


@router.get("/entries", response_model=EntryListResponse, summary="获取条目列表")
async def get_entries(
    book_id: str = Query(ALL_BOOKS, description="日记本ID，all表示全部"),
    search: str = Query("", description="按标题、正文、标签名搜索"),
    store: DiaryStore = Depends(get_diary_store)
):
    """获取当前用户的条目，按创建时间倒序，并按日记本和关键字过滤"""
    try:
        await store.load_entries()
        entries = filter_entries(store.entries, book_id, search)
        return EntryListResponse(success=True, message="获取成功", data=entries, total=len(entries))

    except Exception as e:
        logger.error(f"获取条目列表失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"获取条目列表失败: {str(e)}")


@router.post("/entries", response_model=SaveEntryResponse, summary="保存条目")
async def save_entry(
    request: SaveEntryRequest,
    store: DiaryStore = Depends(get_diary_store)
):
    """
    保存条目

    editing_entry_id为空时新建，否则更新标题正文并整体替换日记本和标签关联。
    标题、正文为空或未选择日记本时不保存，success为False。
    """
    try:
        entry_id = await store.save_entry(
            request.title,
            request.content,
            request.book_ids,
            request.tag_ids,
            request.editing_entry_id
        )
        if entry_id is None:
            await store.load_entries()

        return SaveEntryResponse(
            success=entry_id is not None,
            message="保存成功" if entry_id else "未保存",
            entry_id=entry_id,
            data=store.entries,
            total=len(store.entries)
        )

    except Exception as e:
        logger.error(f"保存条目失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"保存条目失败: {str(e)}")


@router.delete("/entries/{entry_id}", response_model=EntryListResponse, summary="删除条目")
async def delete_entry(
    entry_id: str,
    store: DiaryStore = Depends(get_diary_store)
):
    """删除条目，关联行随条目一起删除"""
    try:
        deleted = await store.delete_entry(entry_id)
        if not deleted:
            await store.load_entries()
            return _entries_response(store, success=False, message="未删除")

        return _entries_response(store, message="删除成功")

    except Exception as e:
        logger.error(f"删除条目失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"删除条目失败: {str(e)}")
