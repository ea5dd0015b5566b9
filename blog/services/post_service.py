"""
Post Service

Provides creation and querying of blog posts.
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.exceptions import ResourceNotFoundError, ValidationError
from blog.models.author import Author
from blog.models.post import Post, PostCategory
from blog.services.base import parse_key

logger = logging.getLogger(__name__)

SUMMARY_LENGTH = 100
MAX_SUMMARY_LENGTH = 255


class PostService:
    """Service for managing posts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_post(
        self,
        author_id: str | int,
        title: str,
        content: str,
        summary: str | None = None,
        category: PostCategory | None = None,
    ) -> Post:
        """
        Create a new post.

        Args:
            author_id: Local ID of the writing author
            title: Post title
            content: Post body
            summary: Optional summary; defaults to the start of the content
            category: Optional category

        Returns:
            Created post instance

        Raises:
            ValidationError if title or content is empty, or the summary is too long
            ResourceNotFoundError if the author does not exist
        """
        if not title or not title.strip():
            raise ValidationError("Post title must not be empty", field="title")
        if not content:
            raise ValidationError("Post content must not be empty", field="content")
        if summary and len(summary) > MAX_SUMMARY_LENGTH:
            raise ValidationError(f"Post summary must be at most {MAX_SUMMARY_LENGTH} characters", field="summary")

        key = parse_key(author_id)
        author = await self.db.get(Author, key) if key is not None else None
        if not author:
            raise ResourceNotFoundError("Author", author_id)

        post = Post(
            title=title.strip(),
            content=content,
            summary=summary if summary else content[:SUMMARY_LENGTH],
            category=category,
            author_id=author.id,
        )
        self.db.add(post)
        await self.db.commit()
        await self.db.refresh(post)

        logger.info(f"Post created: id={post.id}, author={author.id}")
        return post

    async def get_post(self, local_id: str | int | None) -> Post | None:
        key = parse_key(local_id)
        if key is None:
            return None
        return await self.db.get(Post, key)

    async def list_posts(self, category: PostCategory | None = None) -> list[Post]:
        """All posts, oldest first, optionally restricted to one category."""
        query = select(Post).order_by(Post.created_at, Post.id)
        if category is not None:
            query = query.where(Post.category == category)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def recent_posts(self, count: int) -> list[Post]:
        """The `count` newest posts, newest first."""
        if count < 0:
            raise ValidationError("count must be a non-negative integer", field="count")
        if count == 0:
            return []
        result = await self.db.execute(select(Post).order_by(Post.created_at.desc(), Post.id.desc()).limit(count))
        return list(result.scalars().all())

    async def latest_post(self) -> Post | None:
        posts = await self.recent_posts(1)
        return posts[0] if posts else None
