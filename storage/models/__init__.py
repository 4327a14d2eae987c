"""
Storage models package.
"""
# 项目内部导包
from .user import User
from .book import Book
from .tag import Tag
from .entry import Entry
from .entry_book import EntryBook
from .entry_tag import EntryTag

__all__ = [
    "User",
    "Book",
    "Tag",
    "Entry",
    "EntryBook",
    "EntryTag",
]
