"""
Author Model

An author of blog posts and comments.
"""

from sqlalchemy import Column, Integer, String

from blog.database import Base
from blog.models.node_kind import NodeKind


class Author(Base):
    __tablename__ = "authors"
    # Never hand a removed record's id to a new one
    __table_args__ = {"sqlite_autoincrement": True}

    node_kind = NodeKind.AUTHOR

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    twitter_handle = Column(String(64), nullable=True)

    def __repr__(self) -> str:
        return f"<Author(id={self.id}, name='{self.name}')>"
