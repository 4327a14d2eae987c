"""
认证工具
从请求头解析访问令牌，得到显式的用户身份
"""
# 标准库导包
from typing import Optional

# 第三方库导包
from fastapi import Header

# 项目内部导包
from models import AuthContext
from routers.services.auth_service import AuthService

BEARER_PREFIX = "bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """从Authorization头中取出Bearer令牌"""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


async def get_auth_context(
    authorization: Optional[str] = Header(None, alias="Authorization")
) -> Optional[AuthContext]:
    """
    获取当前用户

    没有令牌、令牌无效或过期时返回None，调用方据此给出未登录的空视图

    Args:
        authorization: Authorization header值

    Returns:
        AuthContext对象或None
    """
    return await AuthService.resolve(extract_bearer_token(authorization))
