"""
Comment Model

Supports threaded comments: a comment with a parent_id is a reply.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text

from blog.database import Base
from blog.models.node_kind import NodeKind
from blog.models.post import utcnow


class Comment(Base):
    __tablename__ = "comments"
    # Never hand a removed record's id to a new one
    __table_args__ = {"sqlite_autoincrement": True}

    node_kind = NodeKind.COMMENT

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("authors.id", ondelete="SET NULL"), nullable=True, index=True)

    # Parent comment for replies (null = top-level comment)
    parent_id = Column(Integer, ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)

    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<Comment(id={self.id}, post_id={self.post_id})>"
