# 标准库导包
import json
import logging
import threading
from typing import Any, Optional

# 第三方库导包
import redis.asyncio as redis

# 项目内部导包
from config import settings

logger = logging.getLogger(__name__)

# 全局Redis连接池实例
_redis_pool = None
_redis_pool_lock = threading.Lock()


def get_redis():
    """获取Redis连接实例，支持连接池重建"""
    global _redis_pool

    with _redis_pool_lock:
        if _redis_pool is None:
            logger.info("创建新的Redis连接池...")
            _redis_pool = redis.ConnectionPool.from_url(
                settings.REDIS_URL,
                max_connections=50,
                socket_connect_timeout=60.0,  # 连接超时
                socket_keepalive=True,  # 保持连接
                health_check_interval=15,  # 健康检查间隔，更快发现连接问题
                retry_on_timeout=True,  # 超时重试
                decode_responses=True
            )
            logger.info(f"Redis连接池创建完成，连接地址: {settings.REDIS_URL}")

        return redis.Redis(connection_pool=_redis_pool)


async def close_redis_pool():
    """关闭Redis连接池，下次get_redis时重建"""
    global _redis_pool

    with _redis_pool_lock:
        pool, _redis_pool = _redis_pool, None

    if pool is not None:
        logger.info("关闭现有Redis连接池...")
        await pool.disconnect()
        logger.info("Redis连接池已关闭")


async def set_cache(key: str, value: Any, ttl: Optional[int] = None):
    """
    设置缓存

    参数:
        key: 缓存键
        value: 缓存值，会被转换为JSON字符串
        ttl: 过期时间（秒），为None时不过期
    """
    r = get_redis()

    if ttl is None:
        await r.set(key, json.dumps(value))
    else:
        await r.setex(key, ttl, json.dumps(value))


async def get_cache(key: str):
    """
    获取缓存

    参数:
        key: 缓存键

    返回:
        若缓存存在，返回解析后的值；否则返回None
    """
    r = get_redis()
    data = await r.get(key)
    if data:
        return json.loads(data)
    return None


async def delete_cache(key: str) -> bool:
    """
    删除缓存

    参数:
        key: 缓存键

    返回:
        是否删除了已存在的键
    """
    r = get_redis()
    return await r.delete(key) > 0


# ========== 登录会话相关的Redis操作封装 ==========

def _auth_session_key(token: str) -> str:
    return f"{settings.REDIS_KEY_PREFIXES['AUTH_SESSION']}{token}"


async def get_auth_session(token: str):
    """
    获取登录会话

    参数:
        token: 访问令牌

    返回:
        会话数据字典（user_id, email），不存在或已过期返回None
    """
    return await get_cache(_auth_session_key(token))


async def set_auth_session(token: str, session_data: dict, ttl: int = None):
    """
    保存登录会话

    参数:
        token: 访问令牌
        session_data: 会话数据
        ttl: 过期时间（秒），默认使用settings.AUTH_SESSION_TTL
    """
    if ttl is None:
        ttl = settings.AUTH_SESSION_TTL
    await set_cache(_auth_session_key(token), session_data, ttl)
    logger.debug(f"登录会话已保存到Redis，user_id={session_data.get('user_id')}，TTL: {ttl}秒")


async def delete_auth_session(token: str) -> bool:
    """删除登录会话"""
    return await delete_cache(_auth_session_key(token))


# ========== 视图状态相关的Redis操作封装 ==========

async def get_view_state(user_id: str):
    """
    获取用户的日记视图状态

    参数:
        user_id: 用户ID

    返回:
        视图状态字典，不存在返回None
    """
    return await get_cache(f"{settings.REDIS_KEY_PREFIXES['VIEW_STATE']}{user_id}")


async def set_view_state(user_id: str, state_data: dict, ttl: int = None):
    """
    保存用户的日记视图状态

    参数:
        user_id: 用户ID
        state_data: 视图状态数据
        ttl: 过期时间（秒），默认使用settings.VIEW_STATE_TTL
    """
    if ttl is None:
        ttl = settings.VIEW_STATE_TTL
    await set_cache(f"{settings.REDIS_KEY_PREFIXES['VIEW_STATE']}{user_id}", state_data, ttl)
    logger.debug(f"用户 {user_id} 的视图状态已保存到Redis")
