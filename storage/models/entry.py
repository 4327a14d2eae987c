"""
Entry模型 - 日记条目表
"""
# 标准库导包
import uuid
from datetime import datetime

# 第三方库导包
from sqlalchemy import String, Text, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class Entry(Base):
    """日记条目表"""

    __tablename__ = "entries"

    # 核心字段
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(200), nullable=False, comment="标题")
    content: Mapped[str] = mapped_column(Text, nullable=False, comment="正文")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # 关系定义，关联行由数据库外键级联删除
    book_links: Mapped[list["EntryBook"]] = relationship(
        "EntryBook", back_populates="entry", cascade="all, delete-orphan", passive_deletes=True
    )
    tag_links: Mapped[list["EntryTag"]] = relationship(
        "EntryTag", back_populates="entry", cascade="all, delete-orphan", passive_deletes=True
    )

    # 复合索引
    __table_args__ = (
        Index("idx_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<Entry(id={self.id}, user_id={self.user_id}, title={self.title})>"
