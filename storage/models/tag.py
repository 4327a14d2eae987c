"""
Tag模型 - 标签表
"""
# 标准库导包
import uuid
from datetime import datetime

# 第三方库导包
from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship

# 项目内部导包
from storage.database import Base


class Tag(Base):
    """标签表"""

    __tablename__ = "tags"

    # 核心字段，名称不要求唯一
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True, comment="所属用户ID")
    name: Mapped[str] = mapped_column(String(50), nullable=False, comment="标签名称")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)

    # 关系定义
    entry_links: Mapped[list["EntryTag"]] = relationship(
        "EntryTag", back_populates="tag", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Tag(id={self.id}, name={self.name})>"
