"""
Author Service

Insert, lookup, listing and removal for the authors collection.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from blog.exceptions import ValidationError
from blog.models.author import Author
from blog.services.base import parse_key

logger = logging.getLogger(__name__)


class AuthorService:
    """Service for managing authors."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def add_author(self, name: str, twitter_handle: str | None = None) -> Author:
        """
        Create a new author.

        The primary key is assigned by the store, so concurrent callers never
        receive the same ID.

        Args:
            name: Display name of the author
            twitter_handle: Optional Twitter handle

        Returns:
            Created author instance
        """
        if not name or not name.strip():
            raise ValidationError("Author name must not be empty", field="name")

        author = Author(name=name.strip(), twitter_handle=twitter_handle or None)
        self.db.add(author)
        await self.db.commit()
        await self.db.refresh(author)

        logger.info(f"Author created: id={author.id}")
        return author

    async def get_author(self, local_id: str | int | None) -> Author | None:
        key = parse_key(local_id)
        if key is None:
            return None
        return await self.db.get(Author, key)

    async def list_authors(self) -> list[Author]:
        result = await self.db.execute(select(Author).order_by(Author.id))
        return list(result.scalars().all())

    async def remove_author(self, local_id: str | int) -> bool:
        """
        Delete an author. Removing an author that does not exist is a no-op.

        Returns:
            True if a record was removed
        """
        key = parse_key(local_id)
        if key is None:
            return False

        result = await self.db.execute(delete(Author).where(Author.id == key))
        await self.db.commit()

        removed = result.rowcount > 0
        if removed:
            logger.info(f"Author removed: id={key}")
        return removed
