"""
Comment Service

Provides creation and querying of threaded comments on posts.
"""

import logging

from sqlalchemy import and_, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.exceptions import ResourceNotFoundError, ValidationError
from blog.models.author import Author
from blog.models.comment import Comment
from blog.models.post import Post
from blog.services.base import parse_key

logger = logging.getLogger(__name__)


class CommentService:
    """Service for managing comments."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_comment(
        self,
        post_id: str | int,
        author_id: str | int,
        content: str,
        parent_id: str | int | None = None,
    ) -> Comment:
        """
        Create a new comment.

        Args:
            post_id: Local ID of the post being commented on
            author_id: Local ID of the commenting author
            content: Comment text
            parent_id: Optional local ID of the comment being replied to

        Returns:
            Created comment instance
        """
        if not content or not content.strip():
            raise ValidationError("Comment content must not be empty", field="content")

        post_key = parse_key(post_id)
        post = await self.db.get(Post, post_key) if post_key is not None else None
        if not post:
            raise ResourceNotFoundError("Post", post_id)

        author_key = parse_key(author_id)
        author = await self.db.get(Author, author_key) if author_key is not None else None
        if not author:
            raise ResourceNotFoundError("Author", author_id)

        parent = None
        if parent_id is not None:
            parent_key = parse_key(parent_id)
            parent = await self.db.get(Comment, parent_key) if parent_key is not None else None
            if not parent:
                raise ResourceNotFoundError("Comment", parent_id)
            if parent.post_id != post.id:
                raise ValidationError("Parent comment belongs to a different post", field="parentId")

        comment = Comment(
            post_id=post.id,
            author_id=author.id,
            parent_id=parent.id if parent else None,
            content=content,
        )
        self.db.add(comment)
        await self.db.commit()
        await self.db.refresh(comment)

        logger.info(f"Comment created: id={comment.id}, post={post.id}, author={author.id}")
        return comment

    async def get_comment(self, local_id: str | int | None) -> Comment | None:
        key = parse_key(local_id)
        if key is None:
            return None
        return await self.db.get(Comment, key)

    async def list_comments(self, post_id: str | int) -> list[Comment]:
        """Top-level comments of a post, oldest first."""
        key = parse_key(post_id)
        if key is None:
            return []
        result = await self.db.execute(
            select(Comment)
            .where(and_(Comment.post_id == key, Comment.parent_id.is_(None)))
            .order_by(Comment.created_at, Comment.id)
        )
        return list(result.scalars().all())

    async def list_replies(self, comment_id: str | int) -> list[Comment]:
        """Direct replies to a comment, oldest first."""
        key = parse_key(comment_id)
        if key is None:
            return []
        result = await self.db.execute(
            select(Comment).where(Comment.parent_id == key).order_by(Comment.created_at, Comment.id)
        )
        return list(result.scalars().all())
