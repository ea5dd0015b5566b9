"""Strawberry GraphQL types mapped from the blog models."""

from datetime import datetime, timezone

import strawberry
from strawberry.types import Info

from blog.graphql.context import GraphQLContext
from blog.models.author import Author
from blog.models.comment import Comment
from blog.models.node_kind import NodeKind
from blog.models.post import Post, PostCategory
from blog.services.author_service import AuthorService
from blog.services.comment_service import CommentService
from blog.services.post_service import PostService
from blog.utils.global_id import to_global_id
from blog.utils.pagination import Connection, PageInfo, connection_from_list
from blog.viewer import Viewer

Category = strawberry.enum(PostCategory, name="Category", description="A Category of the blog")


# ============================================================================
# Relay primitives
# ============================================================================


@strawberry.interface(description="An object with a globally unique ID.")
class Node:
    id: strawberry.ID


@strawberry.type(name="PageInfo", description="Information about pagination in a connection.")
class PageInfoType:
    has_next_page: bool
    has_previous_page: bool
    start_cursor: str | None
    end_cursor: str | None


# ============================================================================
# Node types
# ============================================================================


@strawberry.type(name="Author", description="Represent the type of an author of a blog post or a comment")
class AuthorType(Node):
    name: str | None
    twitter_handle: str | None

    local_id: strawberry.Private[int]


@strawberry.type(name="AuthorEdge", description="An edge in a connection of authors.")
class AuthorEdge:
    cursor: str
    node: AuthorType


@strawberry.type(name="AuthorConnection", description="A connection to a list of authors.")
class AuthorConnection:
    edges: list[AuthorEdge]
    page_info: PageInfoType


async def _load_author(info: Info[GraphQLContext, None], author_id: int | None) -> AuthorType | None:
    if author_id is None:
        return None
    author = await info.context.loaders.author_loader.load(author_id)
    return author_to_type(author) if author else None


@strawberry.type(name="Comment", description="Represent the type of a comment")
class CommentType(Node):
    content: str
    timestamp: float | None

    local_id: strawberry.Private[int]
    author_id: strawberry.Private[int | None]

    @strawberry.field
    async def author(self, info: Info[GraphQLContext, None]) -> AuthorType | None:
        return await _load_author(info, self.author_id)

    @strawberry.field(description="Replies for the comment")
    async def replies(self, info: Info[GraphQLContext, None]) -> list["CommentType"]:
        async with info.context.database.session() as db:
            replies = await CommentService(db).list_replies(self.local_id)
        return [comment_to_type(reply) for reply in replies]


@strawberry.type(name="CommentEdge", description="An edge in a connection of comments.")
class CommentEdge:
    cursor: str
    node: CommentType


@strawberry.type(name="CommentConnection", description="A connection to a list of comments.")
class CommentConnection:
    edges: list[CommentEdge]
    page_info: PageInfoType


@strawberry.type(name="Post", description="Represent the type of a blog post")
class PostType(Node):
    title: str
    category: Category | None
    summary: str | None
    content: str
    timestamp: float | None

    local_id: strawberry.Private[int]
    author_id: strawberry.Private[int | None]

    @strawberry.field
    async def author(self, info: Info[GraphQLContext, None]) -> AuthorType | None:
        return await _load_author(info, self.author_id)

    @strawberry.field(description="Top-level comments on the post")
    async def comments(
        self,
        info: Info[GraphQLContext, None],
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> CommentConnection:
        async with info.context.database.session() as db:
            comments = await CommentService(db).list_comments(self.local_id)
        connection = connection_from_list(comments, first=first, after=after, last=last, before=before)
        return CommentConnection(
            edges=[CommentEdge(cursor=edge.cursor, node=comment_to_type(edge.node)) for edge in connection.edges],
            page_info=page_info_to_type(connection.page_info),
        )


@strawberry.type(name="PostEdge", description="An edge in a connection of posts.")
class PostEdge:
    cursor: str
    node: PostType


@strawberry.type(name="PostConnection", description="A connection to a list of posts.")
class PostConnection:
    edges: list[PostEdge]
    page_info: PageInfoType


@strawberry.type(name="User", description="The authenticated viewer")
class UserType(Node):
    @strawberry.field(description="Authors of the blog")
    async def authors(
        self,
        info: Info[GraphQLContext, None],
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> AuthorConnection:
        async with info.context.database.session() as db:
            authors = await AuthorService(db).list_authors()
        return author_connection_to_type(
            connection_from_list(authors, first=first, after=after, last=last, before=before)
        )

    @strawberry.field(description="Posts of the blog, oldest first")
    async def posts(
        self,
        info: Info[GraphQLContext, None],
        category: Category | None = None,
        first: int | None = None,
        after: str | None = None,
        last: int | None = None,
        before: str | None = None,
    ) -> PostConnection:
        async with info.context.database.session() as db:
            posts = await PostService(db).list_posts(category=category)
        connection = connection_from_list(posts, first=first, after=after, last=last, before=before)
        return PostConnection(
            edges=[PostEdge(cursor=edge.cursor, node=post_to_type(edge.node)) for edge in connection.edges],
            page_info=page_info_to_type(connection.page_info),
        )


# ============================================================================
# Input types
# ============================================================================


@strawberry.input
class AddAuthorInput:
    name: str
    twitter_handle: str | None = None
    client_mutation_id: str | None = None


@strawberry.input
class RemoveAuthorInput:
    id: strawberry.ID
    client_mutation_id: str | None = None


@strawberry.input
class CreatePostInput:
    title: str
    content: str
    author_id: strawberry.ID
    summary: str | None = None
    category: Category | None = None
    client_mutation_id: str | None = None


@strawberry.input
class AddCommentInput:
    post_id: strawberry.ID
    author_id: strawberry.ID
    content: str
    parent_id: strawberry.ID | None = None
    client_mutation_id: str | None = None


# ============================================================================
# Helper conversion functions
# ============================================================================


def to_timestamp(value: datetime | None) -> float | None:
    """Milliseconds since the epoch; naive datetimes are taken as UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp() * 1000


def page_info_to_type(page_info: PageInfo) -> PageInfoType:
    return PageInfoType(
        has_next_page=page_info.has_next_page,
        has_previous_page=page_info.has_previous_page,
        start_cursor=page_info.start_cursor,
        end_cursor=page_info.end_cursor,
    )


def viewer_to_type(viewer: Viewer) -> UserType:
    return UserType(id=strawberry.ID(to_global_id(NodeKind.USER.value, viewer.id)))


def author_to_type(author: Author) -> AuthorType:
    return AuthorType(
        id=strawberry.ID(to_global_id(NodeKind.AUTHOR.value, author.id)),
        name=author.name,
        twitter_handle=author.twitter_handle,
        local_id=author.id,
    )


def post_to_type(post: Post) -> PostType:
    return PostType(
        id=strawberry.ID(to_global_id(NodeKind.POST.value, post.id)),
        title=post.title,
        category=post.category,
        summary=post.summary,
        content=post.content,
        timestamp=to_timestamp(post.created_at),
        local_id=post.id,
        author_id=post.author_id,
    )


def comment_to_type(comment: Comment) -> CommentType:
    return CommentType(
        id=strawberry.ID(to_global_id(NodeKind.COMMENT.value, comment.id)),
        content=comment.content,
        timestamp=to_timestamp(comment.created_at),
        local_id=comment.id,
        author_id=comment.author_id,
    )


def author_connection_to_type(connection: Connection[Author]) -> AuthorConnection:
    return AuthorConnection(
        edges=[AuthorEdge(cursor=edge.cursor, node=author_to_type(edge.node)) for edge in connection.edges],
        page_info=page_info_to_type(connection.page_info),
    )
