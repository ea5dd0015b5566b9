"""
Main GraphQL schema definition using Strawberry
"""

import logging

import strawberry
from fastapi import Request
from graphql import GraphQLError
from strawberry.fastapi import GraphQLRouter
from strawberry.types import ExecutionContext

from blog.config import Settings
from blog.exceptions import BlogError
from blog.graphql.context import GraphQLContext
from blog.graphql.mutations import Mutation
from blog.graphql.queries import Query
from blog.graphql.types import AuthorType, CommentType, PostType, UserType
from blog.viewer import get_viewer

logger = logging.getLogger(__name__)


class BlogSchema(strawberry.Schema):
    """Schema that tags domain errors with their error code."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        unexpected = []
        for error in errors:
            original = error.original_error
            if isinstance(original, BlogError):
                error.extensions = {**(error.extensions or {}), "code": original.error_code.value}
                logger.warning(
                    f"GraphQL error: {original.message}",
                    extra={"error_code": original.error_code.value, "path": error.path},
                )
            else:
                unexpected.append(error)

        if unexpected:
            super().process_errors(unexpected, execution_context)


schema = BlogSchema(
    query=Query,
    mutation=Mutation,
    types=[UserType, AuthorType, PostType, CommentType],
)


def create_graphql_router(settings: Settings) -> GraphQLRouter:
    """Create the GraphQL router for FastAPI."""

    async def get_context(request: Request) -> GraphQLContext:
        return GraphQLContext(viewer=get_viewer(), database=request.app.state.database)

    return GraphQLRouter(
        schema,
        path="/graphql",
        graphql_ide="graphiql" if settings.graphiql else None,
        context_getter=get_context,
    )
