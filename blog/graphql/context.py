"""GraphQL context carrying the viewer, the store handle and the loaders into resolvers."""

from __future__ import annotations

from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

from blog.graphql.loaders import Loaders

if TYPE_CHECKING:
    from blog.database import Database
    from blog.viewer import Viewer


class GraphQLContext(BaseContext):
    """
    Context passed to every GraphQL resolver.

    Resolvers open their own short-lived session from `database`; sibling
    fields run concurrently and must not share one.
    """

    def __init__(self, viewer: Viewer, database: Database) -> None:
        super().__init__()
        self.viewer = viewer
        self.database = database
        self.loaders = Loaders(database)
