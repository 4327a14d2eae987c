"""
Utils layer
工具函数层
"""

from .auth import get_auth_context, extract_bearer_token

__all__ = ["get_auth_context", "extract_bearer_token"]
