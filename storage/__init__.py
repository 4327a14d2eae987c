"""
Storage层包
提供数据库连接、模型和Repository的统一访问接口
"""
# 项目内部导包
from .database import (
    get_session,
    get_session_factory,
    create_engine,
    create_session_factory,
    init_db,
    cleanup_db,
    Base,
    engine,
    async_session_factory
)
from .models import (
    User,
    Book,
    Tag,
    Entry,
    EntryBook,
    EntryTag
)
from .repositories import (
    BaseRepository,
    UserRepository,
    BookRepository,
    TagRepository,
    EntryRepository,
    EntryBookRepository,
    EntryTagRepository
)

__all__ = [
    # 数据库连接相关
    "get_session",
    "get_session_factory",
    "create_engine",
    "create_session_factory",
    "init_db",
    "cleanup_db",
    "Base",
    "engine",
    "async_session_factory",

    # 模型相关
    "User",
    "Book",
    "Tag",
    "Entry",
    "EntryBook",
    "EntryTag",

    # Repository相关
    "BaseRepository",
    "UserRepository",
    "BookRepository",
    "TagRepository",
    "EntryRepository",
    "EntryBookRepository",
    "EntryTagRepository",
]
