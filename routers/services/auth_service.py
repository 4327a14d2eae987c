"""
登录认证服务类
处理注册、登录、登出以及访问令牌到用户身份的解析
"""
# 标准库导包
import logging
import secrets
from typing import Awaitable, Callable, List, Optional

# 第三方库导包
from sqlalchemy.ext.asyncio import AsyncSession
from werkzeug.security import generate_password_hash, check_password_hash

# 项目内部导包
from config import settings
from models import AuthContext, AuthSessionData
from redis_client import get_auth_session, set_auth_session, delete_auth_session
from storage.repositories.user_repository import UserRepository

# 配置日志
logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[AuthContext]], Awaitable[None]]


class AuthError(Exception):
    """认证失败，消息会原样返回给用户"""


class AuthService:
    """登录认证服务类"""

    def __init__(self, session: AsyncSession):
        """
        初始化认证服务

        Args:
            session: 数据库会话
        """
        self.session = session
        self.user_repo = UserRepository(session)

    async def sign_up(self, email: str, password: str) -> AuthSessionData:
        """
        注册新用户并直接登录

        Args:
            email: 邮箱
            password: 密码

        Returns:
            登录会话数据

        Raises:
            AuthError: 邮箱格式不合法、密码过短或邮箱已注册
        """
        email = email.strip().lower()
        if "@" not in email:
            raise AuthError("Invalid email address")
        if len(password) < settings.PASSWORD_MIN_LENGTH:
            raise AuthError(f"Password should be at least {settings.PASSWORD_MIN_LENGTH} characters")

        if await self.user_repo.get_by_email(email):
            raise AuthError("User already registered")

        user = await self.user_repo.create(
            email=email,
            password_hash=generate_password_hash(password)
        )
        logger.info(f"用户注册成功: user_id={user.id}")

        return await self._open_session(user.id, user.email)

    async def sign_in(self, email: str, password: str) -> AuthSessionData:
        """
        邮箱密码登录

        Args:
            email: 邮箱
            password: 密码

        Returns:
            登录会话数据

        Raises:
            AuthError: 邮箱或密码错误
        """
        user = await self.user_repo.get_by_email(email.strip().lower())
        if not user or not check_password_hash(user.password_hash, password):
            raise AuthError("Invalid login credentials")

        logger.info(f"用户登录成功: user_id={user.id}")
        return await self._open_session(user.id, user.email)

    @staticmethod
    async def sign_out(token: str) -> bool:
        """
        登出，删除访问令牌对应的会话

        Args:
            token: 访问令牌

        Returns:
            会话是否存在并被删除
        """
        removed = await delete_auth_session(token)
        logger.info(f"用户登出: removed={removed}")
        return removed

    @staticmethod
    async def resolve(token: Optional[str]) -> Optional[AuthContext]:
        """
        将访问令牌解析为用户身份

        Args:
            token: 访问令牌

        Returns:
            AuthContext或None（未登录、令牌无效或过期）
        """
        if not token:
            return None

        session_data = await get_auth_session(token)
        if not session_data:
            return None

        return AuthContext(**session_data)

    @staticmethod
    async def _open_session(user_id: str, email: str) -> AuthSessionData:
        token = secrets.token_urlsafe(32)
        await set_auth_session(token, {"user_id": user_id, "email": email})
        return AuthSessionData(access_token=token, user_id=user_id, email=email)


class AuthState:
    """
    当前登录身份的可订阅状态

    publish时依次通知所有订阅者，DiaryStore据此加载或清空数据。
    """

    def __init__(self, context: Optional[AuthContext] = None):
        self._context = context
        self._listeners: List[AuthListener] = []

    @property
    def current(self) -> Optional[AuthContext]:
        return self._context

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """
        订阅身份变化

        Args:
            listener: 异步回调，参数为新的AuthContext或None

        Returns:
            取消订阅的函数
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def publish(self, context: Optional[AuthContext]):
        """
        更新当前身份并通知订阅者

        Args:
            context: 新的AuthContext，登出时为None
        """
        self._context = context
        for listener in list(self._listeners):
            await listener(context)
