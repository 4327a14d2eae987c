"""
Services layer
业务逻辑层
"""

from .auth_service import AuthService, AuthState, AuthError
from .diary_service import DiaryService, DiaryOperationError
from .diary_store import DiaryStore
from .view_state import ViewStateService, filter_entries

__all__ = [
    "AuthService",
    "AuthState",
    "AuthError",
    "DiaryService",
    "DiaryOperationError",
    "DiaryStore",
    "ViewStateService",
    "filter_entries"
]
