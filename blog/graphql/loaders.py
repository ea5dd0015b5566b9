from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from strawberry.dataloader import DataLoader

from blog.models.author import Author

if TYPE_CHECKING:
    from blog.database import Database


class Loaders:
    """Per-request batch loaders."""

    def __init__(self, database: Database):
        self.database = database
        self.author_loader: DataLoader[int, Author | None] = DataLoader(load_fn=self.load_authors)

    async def load_authors(self, keys: list[int]) -> list[Author | None]:
        """Batch load authors by primary key."""
        async with self.database.session() as session:
            result = await session.execute(select(Author).where(Author.id.in_(keys)))
            authors_map = {author.id: author for author in result.scalars().all()}
        return [authors_map.get(key) for key in keys]
