"""GraphQL Mutation resolvers.

Mutations follow the Relay input/payload shape: a single `input` argument
and a payload echoing `clientMutationId`.
"""

import strawberry
from strawberry.types import Info

from blog.exceptions import ValidationError
from blog.graphql.context import GraphQLContext
from blog.graphql.types import (
    AddAuthorInput,
    AddCommentInput,
    AuthorEdge,
    CommentEdge,
    CreatePostInput,
    PostEdge,
    PostType,
    RemoveAuthorInput,
    UserType,
    author_to_type,
    comment_to_type,
    post_to_type,
    viewer_to_type,
)
from blog.models.node_kind import NodeKind
from blog.services.author_service import AuthorService
from blog.services.comment_service import CommentService
from blog.services.post_service import PostService
from blog.utils.global_id import from_global_id
from blog.utils.pagination import cursor_for_object_in_list


def _local_id(global_id: str, kind: NodeKind, field: str) -> str:
    """Decode a global ID and check that it names the expected type."""
    resolved = from_global_id(global_id)
    if resolved.type_name != kind.value:
        raise ValidationError(f"Expected {kind.value} ID, got {resolved.type_name} ID", field=field)
    return resolved.local_id


def _by_id(record) -> int:
    return record.id


# ============================================================================
# Payload types
# ============================================================================


@strawberry.type
class AddAuthorPayload:
    author_edge: AuthorEdge | None
    client_mutation_id: str | None = None

    @strawberry.field
    def viewer(self, info: Info[GraphQLContext, None]) -> UserType:
        return viewer_to_type(info.context.viewer)


@strawberry.type
class RemoveAuthorPayload:
    deleted_id: strawberry.ID | None
    client_mutation_id: str | None = None

    @strawberry.field
    def viewer(self, info: Info[GraphQLContext, None]) -> UserType:
        return viewer_to_type(info.context.viewer)


@strawberry.type
class CreatePostPayload:
    post_edge: PostEdge | None
    client_mutation_id: str | None = None

    @strawberry.field
    def viewer(self, info: Info[GraphQLContext, None]) -> UserType:
        return viewer_to_type(info.context.viewer)


@strawberry.type
class AddCommentPayload:
    post: PostType | None
    comment_edge: CommentEdge | None
    client_mutation_id: str | None = None


@strawberry.type
class Mutation:
    """Root GraphQL mutation type."""

    @strawberry.mutation(description="Add a new author to the blog.")
    async def add_author(self, info: Info[GraphQLContext, None], input: AddAuthorInput) -> AddAuthorPayload:
        async with info.context.database.session() as db:
            service = AuthorService(db)
            author = await service.add_author(input.name, twitter_handle=input.twitter_handle)
            authors = await service.list_authors()

        cursor = cursor_for_object_in_list(authors, author, key=_by_id)
        return AddAuthorPayload(
            author_edge=AuthorEdge(cursor=cursor, node=author_to_type(author)) if cursor else None,
            client_mutation_id=input.client_mutation_id,
        )

    @strawberry.mutation(description="Remove an author. Removing an unknown author is not an error.")
    async def remove_author(self, info: Info[GraphQLContext, None], input: RemoveAuthorInput) -> RemoveAuthorPayload:
        local_id = _local_id(input.id, NodeKind.AUTHOR, "id")
        async with info.context.database.session() as db:
            await AuthorService(db).remove_author(local_id)

        return RemoveAuthorPayload(deleted_id=input.id, client_mutation_id=input.client_mutation_id)

    @strawberry.mutation(description="Create a new blog post.")
    async def create_post(self, info: Info[GraphQLContext, None], input: CreatePostInput) -> CreatePostPayload:
        author_id = _local_id(input.author_id, NodeKind.AUTHOR, "authorId")
        async with info.context.database.session() as db:
            service = PostService(db)
            post = await service.create_post(
                author_id=author_id,
                title=input.title,
                content=input.content,
                summary=input.summary,
                category=input.category,
            )
            posts = await service.list_posts()

        cursor = cursor_for_object_in_list(posts, post, key=_by_id)
        return CreatePostPayload(
            post_edge=PostEdge(cursor=cursor, node=post_to_type(post)) if cursor else None,
            client_mutation_id=input.client_mutation_id,
        )

    @strawberry.mutation(description="Comment on a post, or reply to a comment.")
    async def add_comment(self, info: Info[GraphQLContext, None], input: AddCommentInput) -> AddCommentPayload:
        post_id = _local_id(input.post_id, NodeKind.POST, "postId")
        author_id = _local_id(input.author_id, NodeKind.AUTHOR, "authorId")
        parent_id = _local_id(input.parent_id, NodeKind.COMMENT, "parentId") if input.parent_id else None

        async with info.context.database.session() as db:
            service = CommentService(db)
            comment = await service.add_comment(post_id, author_id, input.content, parent_id=parent_id)
            if comment.parent_id is not None:
                siblings = await service.list_replies(comment.parent_id)
            else:
                siblings = await service.list_comments(comment.post_id)
            post = await PostService(db).get_post(comment.post_id)

        cursor = cursor_for_object_in_list(siblings, comment, key=_by_id)
        return AddCommentPayload(
            post=post_to_type(post) if post else None,
            comment_edge=CommentEdge(cursor=cursor, node=comment_to_type(comment)) if cursor else None,
            client_mutation_id=input.client_mutation_id,
        )
