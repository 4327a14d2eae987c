"""
测试公共fixture
每个测试使用tmp_path下独立的SQLite文件库，Redis由fakeredis替代
"""
# 标准库导包
import asyncio
import os

# 导入项目模块前切换到SQLite，避免模块级引擎连接MySQL
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

# 第三方库导包
import fakeredis
import fakeredis.aioredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

# 项目内部导包
import redis_client
from main import create_app
from models import AuthContext
from storage.database import (
    create_engine,
    create_session_factory,
    get_session,
    get_session_factory,
    init_db
)


@pytest.fixture
def database_url(tmp_path):
    return f"sqlite+aiosqlite:///{tmp_path / 'diario.db'}"


@pytest.fixture
async def session_factory(database_url):
    engine = create_engine(database_url, poolclass=NullPool)
    await init_db(engine)
    yield create_session_factory(engine)
    await engine.dispose()


@pytest.fixture
def fake_redis(monkeypatch):
    server = fakeredis.FakeServer()
    monkeypatch.setattr(
        redis_client,
        "get_redis",
        lambda: fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
    )
    return server


@pytest.fixture
def owner():
    return AuthContext(user_id="user-001", email="ana@example.com")


@pytest.fixture
def other_owner():
    return AuthContext(user_id="user-002", email="bruno@example.com")


@pytest.fixture
def api_client(database_url, fake_redis):
    engine = create_engine(database_url, poolclass=NullPool)
    asyncio.run(init_db(engine))
    factory = create_session_factory(engine)

    async def override_get_session():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app(lifespan_handler=None)
    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: factory

    with TestClient(app) as client:
        yield client

    asyncio.run(engine.dispose())
