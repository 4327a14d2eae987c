"""
DIARIO Web Server 主应用程序

基于FastAPI和Uvicorn的日记本服务
"""
# 标准库导包
import logging
from contextlib import asynccontextmanager

# 第三方库导包
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# 项目内部导包
from config import settings
from redis_client import close_redis_pool
from storage.database import init_db, cleanup_db
from routers import basic, auth, diary, compose

# 配置日志
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用程序生命周期管理
    """
    # 启动时初始化数据库
    try:
        await init_db()
        logger.info("应用程序启动完成")
        yield
    except Exception as e:
        logger.error(f"应用程序启动失败: {str(e)}")
        raise
    finally:
        # 关闭时清理数据库连接和Redis连接池
        try:
            await cleanup_db()
            await close_redis_pool()
            logger.info("应用程序关闭完成")
        except Exception as e:
            logger.error(f"应用程序关闭时发生错误: {str(e)}")


def create_app(lifespan_handler=lifespan) -> FastAPI:
    """
    创建FastAPI应用实例

    Args:
        lifespan_handler: 生命周期处理函数，测试时可替换

    Returns:
        FastAPI应用
    """
    application = FastAPI(
        title=settings.APP_NAME,
        description="DIARIO Web Server",
        version=settings.APP_VERSION,
        docs_url=settings.DOCS_URL,
        redoc_url=settings.REDOC_URL,
        openapi_url=settings.OPENAPI_URL,
        lifespan=lifespan_handler
    )

    # 添加CORS中间件
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )

    # 注册路由
    application.include_router(basic.router)
    application.include_router(auth.router)
    application.include_router(diary.router)
    application.include_router(compose.router)

    return application


app = create_app()


def main():
    """
    应用程序入口点
    """
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD,
        log_level=settings.LOG_LEVEL,
        workers=settings.WORKERS
    )


if __name__ == "__main__":
    main()
