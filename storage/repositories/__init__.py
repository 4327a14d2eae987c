"""
Storage repositories package.
"""
# 项目内部导包
from .base import BaseRepository
from .user_repository import UserRepository
from .book_repository import BookRepository
from .tag_repository import TagRepository
from .entry_repository import EntryRepository
from .entry_book_repository import EntryBookRepository
from .entry_tag_repository import EntryTagRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "BookRepository",
    "TagRepository",
    "EntryRepository",
    "EntryBookRepository",
    "EntryTagRepository",
]
