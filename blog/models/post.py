"""
Post Model

A blog post written by an author and filed under an optional category.
"""

import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, String, Text

from blog.database import Base
from blog.models.node_kind import NodeKind


class PostCategory(str, enum.Enum):
    """Category of a blog post."""

    NEWS = "news"
    EVENT = "event"
    USER_STORY = "user-story"
    OTHER = "other"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"
    # Never hand a removed record's id to a new one
    __table_args__ = {"sqlite_autoincrement": True}

    node_kind = NodeKind.POST

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    category = Column(Enum(PostCategory), nullable=True, index=True)
    summary = Column(String(255), nullable=True)
    content = Column(Text, nullable=False)

    # Authors can be removed independently; their posts stay
    author_id = Column(Integer, ForeignKey("authors.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Post(id={self.id}, title='{self.title}')>"
