"""
Node resolution for `node(id)`.

A global ID names its type, so a lookup decodes the ID and dispatches to
the fetcher registered for that NodeKind. The reverse direction (which
GraphQL type a fetched object is) reads the explicit `node_kind` tag that
every domain object carries.
"""

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from blog.graphql.context import GraphQLContext
from blog.graphql.types import Node, author_to_type, comment_to_type, post_to_type, viewer_to_type
from blog.models.node_kind import NodeKind
from blog.services.author_service import AuthorService
from blog.services.comment_service import CommentService
from blog.services.post_service import PostService
from blog.utils.global_id import from_global_id

logger = logging.getLogger(__name__)

NodeFetcher = Callable[[GraphQLContext, str], Awaitable[Any]]


async def _fetch_user(context: GraphQLContext, local_id: str):
    return context.viewer if local_id == context.viewer.id else None


async def _fetch_author(context: GraphQLContext, local_id: str):
    async with context.database.session() as db:
        return await AuthorService(db).get_author(local_id)


async def _fetch_post(context: GraphQLContext, local_id: str):
    async with context.database.session() as db:
        return await PostService(db).get_post(local_id)


async def _fetch_comment(context: GraphQLContext, local_id: str):
    async with context.database.session() as db:
        return await CommentService(db).get_comment(local_id)


NODE_FETCHERS: dict[NodeKind, NodeFetcher] = {
    NodeKind.USER: _fetch_user,
    NodeKind.AUTHOR: _fetch_author,
    NodeKind.POST: _fetch_post,
    NodeKind.COMMENT: _fetch_comment,
}

NODE_CONVERTERS: dict[NodeKind, Callable[[Any], Node]] = {
    NodeKind.USER: viewer_to_type,
    NodeKind.AUTHOR: author_to_type,
    NodeKind.POST: post_to_type,
    NodeKind.COMMENT: comment_to_type,
}


async def fetch_node(context: GraphQLContext, global_id: str) -> Any | None:
    """
    Fetch the domain object a global ID refers to.

    Args:
        context: Request context providing the viewer and the store
        global_id: Token received from the client

    Returns:
        The stored object, or None when the type is unknown or the record is absent

    Raises:
        GlobalIdDecodeError if the token is malformed
    """
    resolved = from_global_id(global_id)
    try:
        kind = NodeKind(resolved.type_name)
    except ValueError:
        logger.debug(f"Unknown node type in global ID: {resolved.type_name}")
        return None
    return await NODE_FETCHERS[kind](context, resolved.local_id)


def resolve_node_type(obj: Any) -> NodeKind | None:
    """Which node variant `obj` is, from its explicit tag; None for anything untagged."""
    kind = getattr(obj, "node_kind", None)
    return kind if isinstance(kind, NodeKind) else None


def to_node(obj: Any) -> Node | None:
    """Convert a fetched domain object to its GraphQL node type."""
    kind = resolve_node_type(obj)
    if kind is None:
        return None
    return NODE_CONVERTERS[kind](obj)
