"""
数据模型定义
"""
# 标准库导包
from typing import Optional, List
from datetime import datetime

# 第三方库导包
from pydantic import BaseModel, Field

# 日记本过滤的哨兵值，表示不按日记本过滤
ALL_BOOKS = "all"


class AuthContext(BaseModel):
    """已登录用户的身份，作为所有者显式传入DiaryStore"""
    user_id: str
    email: str


# ========== Auth模块相关模型 ==========

class CredentialsRequest(BaseModel):
    """注册/登录请求模型"""
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=128)


class AuthSessionData(BaseModel):
    """登录会话数据"""
    access_token: str
    user_id: str
    email: str


class AuthSessionResponse(BaseModel):
    """登录会话响应模型"""
    success: bool = True
    message: str = "登录成功"
    data: Optional[AuthSessionData] = None


class CurrentSessionResponse(BaseModel):
    """当前会话响应模型，未登录时data为None"""
    success: bool = True
    message: str = "获取成功"
    data: Optional[AuthContext] = None


# ========== Diary模块相关模型 ==========

class BookResponse(BaseModel):
    """日记本响应模型"""
    id: str
    name: str
    description: str = ""
    created_at: Optional[datetime] = None


class TagResponse(BaseModel):
    """标签响应模型"""
    id: str
    name: str


class EntryResponse(BaseModel):
    """条目响应模型，books/tags为反规范化后的关联对象"""
    id: str
    title: str
    content: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    display_date: str = Field("", description="展示日期，格式：DD/MM/YYYY")
    books: List[BookResponse] = Field(default_factory=list)
    tags: List[TagResponse] = Field(default_factory=list)

    @property
    def book_ids(self) -> List[str]:
        return [book.id for book in self.books]

    @property
    def tag_ids(self) -> List[str]:
        return [tag.id for tag in self.tags]


class CreateBookRequest(BaseModel):
    """创建日记本请求模型"""
    name: str = Field(..., max_length=100)
    description: str = Field(default="", max_length=500)


class CreateTagRequest(BaseModel):
    """创建标签请求模型"""
    name: str = Field(..., max_length=50)


class SaveEntryRequest(BaseModel):
    """保存条目请求模型，editing_entry_id为空时新建，否则整体替换"""
    title: str = Field(default="", max_length=200)
    content: str = Field(default="")
    book_ids: List[str] = Field(default_factory=list, description="日记本ID列表，至少一个")
    tag_ids: List[str] = Field(default_factory=list, description="标签ID列表")
    editing_entry_id: Optional[str] = None


class BookListResponse(BaseModel):
    """日记本列表响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[BookResponse]
    total: int


class TagListResponse(BaseModel):
    """标签列表响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[TagResponse]
    total: int


class EntryListResponse(BaseModel):
    """条目列表响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: List[EntryResponse]
    total: int


class SaveEntryResponse(BaseModel):
    """保存条目响应模型，data为重新加载后的条目列表"""
    success: bool = True
    message: str = "保存成功"
    entry_id: Optional[str] = None
    data: List[EntryResponse]
    total: int


# ========== 视图状态相关模型 ==========

class DiaryViewState(BaseModel):
    """
    日记视图状态

    过滤条件和编辑草稿，可序列化后按用户保存。
    is_writing为False时处于idle，editing_entry_id非空时为编辑已有条目。
    """
    book_filter: str = ALL_BOOKS
    search_term: str = ""
    is_writing: bool = False
    editing_entry_id: Optional[str] = None
    draft_title: str = ""
    draft_content: str = ""
    selected_book_ids: List[str] = Field(default_factory=list)
    selected_tag_ids: List[str] = Field(default_factory=list)


class UpdateFiltersRequest(BaseModel):
    """更新过滤条件请求模型"""
    book_filter: str = ALL_BOOKS
    search_term: str = ""


class UpdateDraftRequest(BaseModel):
    """更新草稿请求模型"""
    title: str = Field(default="", max_length=200)
    content: str = ""


class ViewStateResponse(BaseModel):
    """视图状态响应模型"""
    success: bool = True
    message: str = "获取成功"
    data: DiaryViewState
