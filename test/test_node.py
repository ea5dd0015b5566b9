"""
Tests for global object resolution (`node(id)` dispatch and type tagging).
"""

import pytest

from blog.exceptions import GlobalIdDecodeError
from blog.graphql.node import fetch_node, resolve_node_type, to_node
from blog.graphql.types import AuthorType, CommentType, PostType, UserType
from blog.models import Author, Comment, NodeKind, Post
from blog.services.author_service import AuthorService
from blog.services.comment_service import CommentService
from blog.services.post_service import PostService
from blog.utils.global_id import to_global_id
from blog.viewer import Viewer


class TestResolveNodeType:
    @pytest.mark.parametrize(
        "obj,expected",
        [
            (Author(name="Jane"), NodeKind.AUTHOR),
            (Post(title="Hello", content="World"), NodeKind.POST),
            (Comment(content="Nice"), NodeKind.COMMENT),
            (Viewer(id="me"), NodeKind.USER),
        ],
    )
    def test_tagged_objects(self, obj, expected):
        assert resolve_node_type(obj) == expected

    def test_untagged_object(self):
        assert resolve_node_type(object()) is None

    def test_shape_alone_does_not_decide_the_type(self):
        """A dict that looks like a post is still not a tagged node."""
        assert resolve_node_type({"title": "Looks like a post"}) is None
        assert resolve_node_type({"replies": []}) is None

    def test_tag_must_be_a_node_kind(self):
        class Impostor:
            node_kind = "Author"

        assert resolve_node_type(Impostor()) is None


class TestToNode:
    def test_converts_author(self):
        author = Author(id=3, name="Jane", twitter_handle="@jane")
        node = to_node(author)

        assert isinstance(node, AuthorType)
        assert node.id == to_global_id("Author", 3)
        assert node.name == "Jane"
        assert node.twitter_handle == "@jane"

    def test_converts_viewer(self):
        node = to_node(Viewer(id="me"))

        assert isinstance(node, UserType)
        assert node.id == to_global_id("User", "me")

    def test_unknown_object(self):
        assert to_node(object()) is None


class TestFetchNode:
    @pytest.mark.asyncio
    async def test_fetches_author(self, graphql_context, test_db):
        author = await AuthorService(test_db).add_author("Jane")

        fetched = await fetch_node(graphql_context, to_global_id("Author", author.id))

        assert isinstance(fetched, Author)
        assert fetched.name == "Jane"

    @pytest.mark.asyncio
    async def test_fetches_post_and_comment(self, graphql_context, test_db):
        author = await AuthorService(test_db).add_author("Jane")
        post = await PostService(test_db).create_post(author.id, "Title", "Body")
        comment = await CommentService(test_db).add_comment(post.id, author.id, "First!")

        fetched_post = await fetch_node(graphql_context, to_global_id("Post", post.id))
        fetched_comment = await fetch_node(graphql_context, to_global_id("Comment", comment.id))

        assert isinstance(fetched_post, Post)
        assert fetched_post.title == "Title"
        assert isinstance(fetched_comment, Comment)
        assert fetched_comment.content == "First!"
        assert isinstance(to_node(fetched_post), PostType)
        assert isinstance(to_node(fetched_comment), CommentType)

    @pytest.mark.asyncio
    async def test_fetches_viewer(self, graphql_context):
        fetched = await fetch_node(graphql_context, to_global_id("User", "me"))
        assert fetched == graphql_context.viewer

    @pytest.mark.asyncio
    async def test_other_user_is_absent(self, graphql_context):
        assert await fetch_node(graphql_context, to_global_id("User", "someone-else")) is None

    @pytest.mark.asyncio
    async def test_absent_record_is_none(self, graphql_context):
        assert await fetch_node(graphql_context, to_global_id("Author", 999)) is None

    @pytest.mark.asyncio
    async def test_non_numeric_local_id_is_none(self, graphql_context):
        assert await fetch_node(graphql_context, to_global_id("Post", "not-a-number")) is None

    @pytest.mark.asyncio
    async def test_unknown_type_is_none(self, graphql_context):
        assert await fetch_node(graphql_context, to_global_id("Widget", "1")) is None

    @pytest.mark.asyncio
    async def test_malformed_token_raises_decode_error(self, graphql_context):
        with pytest.raises(GlobalIdDecodeError):
            await fetch_node(graphql_context, "%%%")
