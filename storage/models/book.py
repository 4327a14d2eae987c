"""
Book模型 - 日记本表
"""
# 标准库导包
import uuid
from datetime import datetime

# 第三方库导包
from sqlalchemy import String, DateTime, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class Book(Base):
    """日记本表"""

    __tablename__ = "books"

    # 核心字段
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True, comment="所属用户ID")
    name: Mapped[str] = mapped_column(String(100), nullable=False, comment="日记本名称")
    description: Mapped[str] = mapped_column(String(500), nullable=False, default="", comment="日记本描述")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    # 关系定义
    entry_links: Mapped[list["EntryBook"]] = relationship(
        "EntryBook", back_populates="book", cascade="all, delete-orphan", passive_deletes=True
    )

    # 复合索引
    __table_args__ = (
        Index("idx_book_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<Book(id={self.id}, user_id={self.user_id}, name={self.name})>"
