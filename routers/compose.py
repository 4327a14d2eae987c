"""
编辑路由
维护用户的过滤条件和条目编辑草稿（idle / 新建 / 编辑），并基于草稿保存条目
"""
# 标准库导包
import logging
from typing import Optional

# 第三方库导包
from fastapi import APIRouter, HTTPException, Depends

# 项目内部导包
from models import (
    AuthContext,
    EntryListResponse,
    SaveEntryResponse,
    UpdateDraftRequest,
    UpdateFiltersRequest,
    ViewStateResponse
)
from routers.diary import get_diary_store
from routers.services.diary_store import DiaryStore
from routers.services import view_state
from routers.services.view_state import ViewStateService
from utils import get_auth_context

# 配置日志
logger = logging.getLogger(__name__)

# 创建路由器
router = APIRouter(
    prefix="/compose",
    tags=["条目编辑"]
)


async def _save_state(auth_context: Optional[AuthContext], state, message: str = "更新成功") -> ViewStateResponse:
    state = await ViewStateService.save(auth_context, state)
    return ViewStateResponse(success=True, message=message, data=state)


@router.get("/state", response_model=ViewStateResponse, summary="获取视图状态")
async def get_state(auth_context: Optional[AuthContext] = Depends(get_auth_context)):
    """获取过滤条件与编辑草稿，未登录时返回默认状态"""
    try:
        state = await ViewStateService.load(auth_context)
        return ViewStateResponse(success=True, message="获取成功", data=state)

    except Exception as e:
        logger.error(f"获取视图状态失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"获取视图状态失败: {str(e)}")


@router.put("/filters", response_model=ViewStateResponse, summary="更新过滤条件")
async def update_filters(
    request: UpdateFiltersRequest,
    auth_context: Optional[AuthContext] = Depends(get_auth_context)
):
    try:
        state = await ViewStateService.load(auth_context)
        state = view_state.apply_filters(state, request.book_filter, request.search_term)
        return await _save_state(auth_context, state)

    except Exception as e:
        logger.error(f"更新过滤条件失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"更新过滤条件失败: {str(e)}")


@router.post("/new", response_model=ViewStateResponse, summary="开始新建条目")
async def begin_new_entry(auth_context: Optional[AuthContext] = Depends(get_auth_context)):
    try:
        state = await ViewStateService.load(auth_context)
        return await _save_state(auth_context, view_state.begin_new_entry(state))

    except Exception as e:
        logger.error(f"开始新建条目失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"开始新建条目失败: {str(e)}")


@router.post("/edit/{entry_id}", response_model=ViewStateResponse, summary="开始编辑条目")
async def begin_edit_entry(
    entry_id: str,
    auth_context: Optional[AuthContext] = Depends(get_auth_context),
    store: DiaryStore = Depends(get_diary_store)
):
    """用已保存条目的标题、正文、日记本和标签预填草稿"""
    try:
        await store.load_entries()
        entry = store.find_entry(entry_id)
        if not entry:
            raise HTTPException(status_code=404, detail="条目不存在或无权限")

        state = await ViewStateService.load(auth_context)
        return await _save_state(auth_context, view_state.begin_edit_entry(state, entry))

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"开始编辑条目失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"开始编辑条目失败: {str(e)}")


@router.put("/draft", response_model=ViewStateResponse, summary="更新草稿")
async def update_draft(
    request: UpdateDraftRequest,
    auth_context: Optional[AuthContext] = Depends(get_auth_context)
):
    try:
        state = await ViewStateService.load(auth_context)
        return await _save_state(auth_context, view_state.update_draft(state, request.title, request.content))

    except Exception as e:
        logger.error(f"更新草稿失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"更新草稿失败: {str(e)}")


@router.post("/books/{book_id}/toggle", response_model=ViewStateResponse, summary="切换日记本选择")
async def toggle_book(
    book_id: str,
    auth_context: Optional[AuthContext] = Depends(get_auth_context)
):
    try:
        state = await ViewStateService.load(auth_context)
        return await _save_state(auth_context, view_state.toggle_book_selection(state, book_id))

    except Exception as e:
        logger.error(f"切换日记本选择失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"切换日记本选择失败: {str(e)}")


@router.post("/tags/{tag_id}/toggle", response_model=ViewStateResponse, summary="切换标签选择")
async def toggle_tag(
    tag_id: str,
    auth_context: Optional[AuthContext] = Depends(get_auth_context)
):
    try:
        state = await ViewStateService.load(auth_context)
        return await _save_state(auth_context, view_state.toggle_tag_selection(state, tag_id))

    except Exception as e:
        logger.error(f"切换标签选择失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"切换标签选择失败: {str(e)}")


@router.post("/cancel", response_model=ViewStateResponse, summary="取消编辑")
async def cancel_compose(auth_context: Optional[AuthContext] = Depends(get_auth_context)):
    try:
        state = await ViewStateService.load(auth_context)
        return await _save_state(auth_context, view_state.reset_compose(state), message="已取消")

    except Exception as e:
        logger.error(f"取消编辑失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"取消编辑失败: {str(e)}")


@router.post("/save", response_model=SaveEntryResponse, summary="保存草稿")
async def save_draft(
    auth_context: Optional[AuthContext] = Depends(get_auth_context),
    store: DiaryStore = Depends(get_diary_store)
):
    """
    将草稿保存为条目

    保存成功后回到idle并清空草稿；未保存时草稿保持不变
    """
    try:
        state = await ViewStateService.load(auth_context)
        entry_id = await store.save_entry(
            state.draft_title,
            state.draft_content,
            state.selected_book_ids,
            state.selected_tag_ids,
            state.editing_entry_id
        )

        if entry_id is None:
            await store.load_entries()
        else:
            await ViewStateService.save(auth_context, view_state.reset_compose(state))

        return SaveEntryResponse(
            success=entry_id is not None,
            message="保存成功" if entry_id else "未保存",
            entry_id=entry_id,
            data=store.entries,
            total=len(store.entries)
        )

    except Exception as e:
        logger.error(f"保存草稿失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"保存草稿失败: {str(e)}")


@router.get("/entries", response_model=EntryListResponse, summary="按视图状态获取条目")
async def get_filtered_entries(
    auth_context: Optional[AuthContext] = Depends(get_auth_context),
    store: DiaryStore = Depends(get_diary_store)
):
    """按保存的日记本过滤和搜索关键字返回条目"""
    try:
        state = await ViewStateService.load(auth_context)
        await store.load_entries()
        entries = view_state.filter_entries(store.entries, state.book_filter, state.search_term)
        return EntryListResponse(success=True, message="获取成功", data=entries, total=len(entries))

    except Exception as e:
        logger.error(f"按视图状态获取条目失败: {str(e)}")
        raise HTTPException(status_code=500, detail=f"按视图状态获取条目失败: {str(e)}")
