"""
日记视图状态
过滤和编辑草稿的纯函数状态转换，以及按用户保存到Redis的ViewStateService
"""
# 标准库导包
import logging
from typing import Iterable, List, Optional

# 第三方库导包
from pydantic import ValidationError

# 项目内部导包
from models import ALL_BOOKS, AuthContext, DiaryViewState, EntryResponse
from redis_client import get_view_state, set_view_state

# 配置日志
logger = logging.getLogger(__name__)


def toggle_selection(selected_ids: Iterable[str], item_id: str) -> List[str]:
    """不在列表中则追加，已在列表中则移除"""
    selected_ids = list(selected_ids)
    if item_id in selected_ids:
        return [selected_id for selected_id in selected_ids if selected_id != item_id]
    return selected_ids + [item_id]


def toggle_tag_selection(state: DiaryViewState, tag_id: str) -> DiaryViewState:
    """切换草稿中某个标签的选中状态，不产生任何网络请求"""
    return state.model_copy(update={
        "selected_tag_ids": toggle_selection(state.selected_tag_ids, tag_id)
    })


def toggle_book_selection(state: DiaryViewState, book_id: str) -> DiaryViewState:
    """切换草稿中某个日记本的选中状态"""
    return state.model_copy(update={
        "selected_book_ids": toggle_selection(state.selected_book_ids, book_id)
    })


def begin_new_entry(state: DiaryViewState) -> DiaryViewState:
    """idle -> composing(new)，清空草稿"""
    return reset_compose(state).model_copy(update={"is_writing": True})


def begin_edit_entry(state: DiaryViewState, entry: EntryResponse) -> DiaryViewState:
    """idle -> composing(edit)，用目标条目预填草稿"""
    return state.model_copy(update={
        "is_writing": True,
        "editing_entry_id": entry.id,
        "draft_title": entry.title,
        "draft_content": entry.content,
        "selected_book_ids": entry.book_ids,
        "selected_tag_ids": entry.tag_ids,
    })


def update_draft(state: DiaryViewState, title: str, content: str) -> DiaryViewState:
    return state.model_copy(update={"draft_title": title, "draft_content": content})


def reset_compose(state: DiaryViewState) -> DiaryViewState:
    """回到idle，清空所有编辑中的临时字段，保留过滤条件"""
    return DiaryViewState(book_filter=state.book_filter, search_term=state.search_term)


def apply_filters(state: DiaryViewState, book_filter: str, search_term: str) -> DiaryViewState:
    return state.model_copy(update={
        "book_filter": book_filter or ALL_BOOKS,
        "search_term": search_term or ""
    })


def filter_entries(
    entries: List[EntryResponse],
    book_filter: str = ALL_BOOKS,
    search_term: str = ""
) -> List[EntryResponse]:
    """
    按日记本和关键字过滤条目

    book_filter为"all"或条目包含该日记本时保留；search_term为空，
    或不区分大小写地出现在标题、正文或任一标签名中时保留。结果保持原有顺序。

    Args:
        entries: 条目列表
        book_filter: 日记本ID或"all"
        search_term: 搜索关键字

    Returns:
        过滤后的条目列表
    """
    term = (search_term or "").lower()

    def matches_book(entry: EntryResponse) -> bool:
        return book_filter == ALL_BOOKS or any(book.id == book_filter for book in entry.books)

    def matches_search(entry: EntryResponse) -> bool:
        if not term:
            return True
        return (
            term in entry.title.lower()
            or term in entry.content.lower()
            or any(term in tag.name.lower() for tag in entry.tags)
        )

    return [entry for entry in entries if matches_book(entry) and matches_search(entry)]


class ViewStateService:
    """视图状态服务类，已登录用户的状态保存在Redis中"""

    @staticmethod
    async def load(auth_context: Optional[AuthContext]) -> DiaryViewState:
        """
        读取视图状态

        Args:
            auth_context: 当前用户，未登录时返回默认状态

        Returns:
            DiaryViewState对象
        """
        if auth_context is None:
            return DiaryViewState()

        state_data = await get_view_state(auth_context.user_id)
        if not state_data:
            return DiaryViewState()

        try:
            return DiaryViewState(**state_data)
        except ValidationError as e:
            logger.warning(f"视图状态数据无效，使用默认状态: user_id={auth_context.user_id}, error={str(e)}")
            return DiaryViewState()

    @staticmethod
    async def save(auth_context: Optional[AuthContext], state: DiaryViewState) -> DiaryViewState:
        """
        保存视图状态，未登录时不持久化

        Args:
            auth_context: 当前用户
            state: 视图状态

        Returns:
            传入的视图状态
        """
        if auth_context is not None:
            await set_view_state(auth_context.user_id, state.model_dump())
        return state
