"""Database configuration module."""
# 标准库导包
import logging
from typing import AsyncGenerator

# 第三方库导包
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

# 项目内部导包
from config import settings

# 配置日志
logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def get_database_url() -> str:
    """构建数据库URL"""
    if settings.DATABASE_URL:
        return settings.DATABASE_URL

    # 从HOST中分离主机和端口
    host_port = settings.DB_HOST
    if ':' in host_port:
        host, port = host_port.split(':')
    else:
        host = host_port
        port = "3306"

    # 构建异步MySQL URL
    database_url = f"mysql+aiomysql://{settings.DB_USER}:{settings.DB_PASSWORD}@{host}:{port}/{settings.DB_NAME}"
    return database_url


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    """SQLite默认不执行外键约束，关联表的级联删除依赖它"""
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_engine(database_url: str, **kwargs) -> AsyncEngine:
    """
    创建异步引擎

    SQLite不支持连接池大小等参数，只有其它数据库才套用连接池配置。

    Args:
        database_url: 数据库URL
        **kwargs: 透传给create_async_engine的额外参数

    Returns:
        AsyncEngine: 异步引擎
    """
    if database_url.startswith("sqlite"):
        engine = create_async_engine(database_url, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_async_engine(
        database_url,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_CONNECTIONS - settings.DB_POOL_SIZE,
        pool_recycle=settings.DB_POOL_RECYCLE,
        pool_timeout=settings.DB_POOL_TIMEOUT,
        echo=settings.DEBUG,  # 调试模式下显示SQL语句
        echo_pool=settings.DEBUG,  # 调试模式下显示连接池信息
        **kwargs
    )


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """创建会话工厂"""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autocommit=False,
        autoflush=False
    )


def mask_database_url(database_url: str) -> str:
    """隐藏数据库URL中的密码，用于日志输出"""
    return make_url(database_url).render_as_string(hide_password=True)


# 获取数据库URL
DATABASE_URL = get_database_url()
logger.info(f"数据库连接URL: {mask_database_url(DATABASE_URL)}")

# 创建异步引擎
engine = create_engine(DATABASE_URL)

# 创建会话工厂
async_session_factory = create_session_factory(engine)


async def init_db(bind: AsyncEngine = None):
    """初始化数据库，创建所有表"""
    # 确保所有模型都已注册到Base.metadata
    import storage.models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
        logger.info("数据库表初始化完成")


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """获取会话工厂，DiaryStore按操作自行开启会话和事务"""
    return async_session_factory


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """获取数据库会话的异步生成器

    这是一个依赖注入函数，可以用于FastAPI的Depends。

    Yields:
        AsyncSession: 数据库会话对象
    """
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception as e:
            logger.error(f"数据库会话发生错误: {str(e)}")
            await session.rollback()
            raise
        finally:
            await session.close()


async def cleanup_db():
    """清理数据库连接"""
    await engine.dispose()
    logger.info("数据库连接已关闭")
