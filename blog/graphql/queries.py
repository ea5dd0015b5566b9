"""GraphQL Query resolvers."""

import strawberry
from strawberry.types import Info

from blog.graphql.context import GraphQLContext
from blog.graphql.node import fetch_node, to_node
from blog.graphql.types import Node, PostType, UserType, post_to_type, viewer_to_type
from blog.services.post_service import PostService


@strawberry.type
class Query:
    """Root GraphQL query type."""

    @strawberry.field(description="The authenticated user.")
    def viewer(self, info: Info[GraphQLContext, None]) -> UserType:
        return viewer_to_type(info.context.viewer)

    @strawberry.field(description="Fetches an object given its global ID.")
    async def node(self, info: Info[GraphQLContext, None], id: strawberry.ID) -> Node | None:
        obj = await fetch_node(info.context, id)
        if obj is None:
            return None
        return to_node(obj)

    @strawberry.field(description="Latest post in the blog")
    async def latest_post(self, info: Info[GraphQLContext, None]) -> PostType | None:
        async with info.context.database.session() as db:
            post = await PostService(db).latest_post()
        return post_to_type(post) if post else None

    @strawberry.field(description="Recent posts in the blog, newest first")
    async def recent_posts(self, info: Info[GraphQLContext, None], count: int) -> list[PostType]:
        async with info.context.database.session() as db:
            posts = await PostService(db).recent_posts(count)
        return [post_to_type(post) for post in posts]
