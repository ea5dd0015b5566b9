"""
Tests for the GraphQL schema: node resolution, connections and mutations.
"""

import pytest

from blog.graphql.schema import schema
from blog.utils.global_id import from_global_id, to_global_id
from blog.utils.pagination import offset_to_cursor

ADD_AUTHOR = """
mutation AddAuthor($input: AddAuthorInput!) {
    addAuthor(input: $input) {
        clientMutationId
        authorEdge { cursor node { id name twitterHandle } }
        viewer { id }
    }
}
"""

REMOVE_AUTHOR = """
mutation RemoveAuthor($input: RemoveAuthorInput!) {
    removeAuthor(input: $input) { deletedId clientMutationId viewer { id } }
}
"""

CREATE_POST = """
mutation CreatePost($input: CreatePostInput!) {
    createPost(input: $input) {
        clientMutationId
        postEdge { cursor node { id title summary category timestamp author { name } } }
    }
}
"""

ADD_COMMENT = """
mutation AddComment($input: AddCommentInput!) {
    addComment(input: $input) {
        clientMutationId
        post { id title }
        commentEdge { cursor node { id content author { name } } }
    }
}
"""

NODE_QUERY = """
query Node($id: ID!) {
    node(id: $id) {
        __typename
        id
        ... on Author { name }
        ... on Post { title }
        ... on Comment { content }
    }
}
"""

AUTHORS_QUERY = """
query Authors($first: Int, $after: String, $last: Int, $before: String) {
    viewer {
        authors(first: $first, after: $after, last: $last, before: $before) {
            edges { cursor node { name } }
            pageInfo { hasNextPage hasPreviousPage startCursor endCursor }
        }
    }
}
"""


async def add_author(execute, name: str, **extra) -> dict:
    result = await execute(ADD_AUTHOR, {"input": {"name": name, **extra}})
    assert result.errors is None
    return result.data["addAuthor"]


async def create_post(execute, author_id: str, title: str, **extra) -> dict:
    variables = {"input": {"authorId": author_id, "title": title, "content": f"{title} content", **extra}}
    result = await execute(CREATE_POST, variables)
    assert result.errors is None
    return result.data["createPost"]["postEdge"]["node"]


def error_code(result) -> str:
    assert result.errors, "expected an error"
    return result.errors[0].extensions["code"]


class TestSchema:
    def test_node_interface_implementations(self):
        sdl = schema.as_str()

        assert "interface Node" in sdl
        for type_name in ["User", "Author", "Post", "Comment"]:
            assert f"type {type_name} implements Node" in sdl

    def test_category_enum(self):
        sdl = schema.as_str()

        assert "enum Category" in sdl
        for value in ["NEWS", "EVENT", "USER_STORY", "OTHER"]:
            assert value in sdl


class TestViewer:
    @pytest.mark.asyncio
    async def test_viewer_id(self, execute):
        result = await execute("{ viewer { id } }")

        assert result.errors is None
        assert result.data["viewer"]["id"] == to_global_id("User", "me")

    @pytest.mark.asyncio
    async def test_viewer_by_node(self, execute):
        result = await execute(NODE_QUERY, {"id": to_global_id("User", "me")})

        assert result.errors is None
        assert result.data["node"] == {"__typename": "User", "id": to_global_id("User", "me")}


class TestAddAuthor:
    @pytest.mark.asyncio
    async def test_add_then_fetch_by_node(self, execute):
        payload = await add_author(execute, "Jane", twitterHandle="@jane", clientMutationId="abc")

        node = payload["authorEdge"]["node"]
        assert payload["clientMutationId"] == "abc"
        assert payload["viewer"]["id"] == to_global_id("User", "me")
        assert from_global_id(node["id"]).type_name == "Author"
        assert node["twitterHandle"] == "@jane"

        result = await execute(NODE_QUERY, {"id": node["id"]})
        assert result.errors is None
        assert result.data["node"] == {"__typename": "Author", "id": node["id"], "name": "Jane"}

    @pytest.mark.asyncio
    async def test_edge_cursor_is_position_in_authors(self, execute):
        await add_author(execute, "First")
        payload = await add_author(execute, "Second")

        assert payload["authorEdge"]["cursor"] == offset_to_cursor(1)

    @pytest.mark.asyncio
    async def test_client_mutation_id_is_optional(self, execute):
        payload = await add_author(execute, "Jane")
        assert payload["clientMutationId"] is None

    @pytest.mark.asyncio
    async def test_blank_name(self, execute):
        result = await execute(ADD_AUTHOR, {"input": {"name": "  "}})
        assert error_code(result) == "VALIDATION_FAILED"


class TestRemoveAuthor:
    @pytest.mark.asyncio
    async def test_remove_then_node_is_null(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]

        result = await execute(REMOVE_AUTHOR, {"input": {"id": author_id, "clientMutationId": "rm-1"}})
        assert result.errors is None
        assert result.data["removeAuthor"]["deletedId"] == author_id
        assert result.data["removeAuthor"]["clientMutationId"] == "rm-1"

        result = await execute(NODE_QUERY, {"id": author_id})
        assert result.errors is None
        assert result.data["node"] is None

    @pytest.mark.asyncio
    async def test_remove_is_idempotent(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]

        for _ in range(2):
            result = await execute(REMOVE_AUTHOR, {"input": {"id": author_id}})
            assert result.errors is None
            assert result.data["removeAuthor"]["deletedId"] == author_id

    @pytest.mark.asyncio
    async def test_remove_leaves_other_authors(self, execute):
        jane = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]
        await add_author(execute, "John")

        await execute(REMOVE_AUTHOR, {"input": {"id": jane}})
        result = await execute(AUTHORS_QUERY)

        assert [edge["node"]["name"] for edge in result.data["viewer"]["authors"]["edges"]] == ["John"]

    @pytest.mark.asyncio
    async def test_wrong_type_of_id(self, execute):
        result = await execute(REMOVE_AUTHOR, {"input": {"id": to_global_id("Post", 1)}})
        assert error_code(result) == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_malformed_id(self, execute):
        result = await execute(REMOVE_AUTHOR, {"input": {"id": "%%%"}})
        assert error_code(result) == "INVALID_GLOBAL_ID"


class TestNodeQuery:
    @pytest.mark.asyncio
    async def test_malformed_id(self, execute):
        result = await execute(NODE_QUERY, {"id": "not base64!!"})

        assert result.data["node"] is None
        assert error_code(result) == "INVALID_GLOBAL_ID"

    @pytest.mark.asyncio
    async def test_unknown_type(self, execute):
        result = await execute(NODE_QUERY, {"id": to_global_id("Widget", "1")})

        assert result.errors is None
        assert result.data["node"] is None

    @pytest.mark.asyncio
    async def test_absent_author(self, execute):
        result = await execute(NODE_QUERY, {"id": to_global_id("Author", "999")})

        assert result.errors is None
        assert result.data["node"] is None


class TestAuthorsConnection:
    @pytest.mark.asyncio
    async def test_forward_pagination(self, execute):
        for name in ["A", "B", "C", "D", "E"]:
            await add_author(execute, name)

        result = await execute(AUTHORS_QUERY, {"first": 2})
        connection = result.data["viewer"]["authors"]
        assert [edge["node"]["name"] for edge in connection["edges"]] == ["A", "B"]
        assert connection["pageInfo"]["hasNextPage"] is True
        assert connection["pageInfo"]["hasPreviousPage"] is False

        result = await execute(AUTHORS_QUERY, {"first": 2, "after": connection["pageInfo"]["endCursor"]})
        connection = result.data["viewer"]["authors"]
        assert [edge["node"]["name"] for edge in connection["edges"]] == ["C", "D"]
        assert connection["pageInfo"]["hasPreviousPage"] is True

    @pytest.mark.asyncio
    async def test_backward_pagination(self, execute):
        for name in ["A", "B", "C", "D", "E"]:
            await add_author(execute, name)

        result = await execute(AUTHORS_QUERY, {"last": 2})
        connection = result.data["viewer"]["authors"]

        assert [edge["node"]["name"] for edge in connection["edges"]] == ["D", "E"]
        assert connection["pageInfo"]["hasNextPage"] is False
        assert connection["pageInfo"]["hasPreviousPage"] is True

    @pytest.mark.asyncio
    async def test_empty(self, execute):
        result = await execute(AUTHORS_QUERY)
        connection = result.data["viewer"]["authors"]

        assert connection["edges"] == []
        assert connection["pageInfo"] == {
            "hasNextPage": False,
            "hasPreviousPage": False,
            "startCursor": None,
            "endCursor": None,
        }

    @pytest.mark.asyncio
    async def test_negative_first(self, execute):
        result = await execute(AUTHORS_QUERY, {"first": -1})
        assert error_code(result) == "INVALID_PAGINATION_ARGUMENT"

    @pytest.mark.asyncio
    async def test_malformed_cursor(self, execute):
        result = await execute(AUTHORS_QUERY, {"after": "garbage!!"})
        assert error_code(result) == "INVALID_PAGINATION_ARGUMENT"


class TestPosts:
    @pytest.mark.asyncio
    async def test_create_post_and_latest(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]
        await create_post(execute, author_id, "Older")
        post = await create_post(execute, author_id, "Newer", category="NEWS", summary="Short")

        assert post["category"] == "NEWS"
        assert post["summary"] == "Short"
        assert post["author"] == {"name": "Jane"}
        assert post["timestamp"] > 0

        result = await execute("{ latestPost { title } recentPosts(count: 5) { title } }")
        assert result.errors is None
        assert result.data["latestPost"]["title"] == "Newer"
        assert [p["title"] for p in result.data["recentPosts"]] == ["Newer", "Older"]

    @pytest.mark.asyncio
    async def test_latest_post_when_empty(self, execute):
        result = await execute("{ latestPost { title } }")

        assert result.errors is None
        assert result.data["latestPost"] is None

    @pytest.mark.asyncio
    async def test_posts_filtered_by_category(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]
        await create_post(execute, author_id, "Story", category="USER_STORY")
        await create_post(execute, author_id, "Meetup", category="EVENT")

        result = await execute("{ viewer { posts(category: EVENT) { edges { node { title category } } } } }")

        assert result.errors is None
        assert result.data["viewer"]["posts"]["edges"] == [{"node": {"title": "Meetup", "category": "EVENT"}}]

    @pytest.mark.asyncio
    async def test_post_by_node(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]
        post = await create_post(execute, author_id, "Hello")

        result = await execute(NODE_QUERY, {"id": post["id"]})

        assert result.data["node"] == {"__typename": "Post", "id": post["id"], "title": "Hello"}

    @pytest.mark.asyncio
    async def test_unknown_author(self, execute):
        variables = {"input": {"authorId": to_global_id("Author", 999), "title": "T", "content": "C"}}
        result = await execute(CREATE_POST, variables)

        assert error_code(result) == "RESOURCE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_negative_recent_posts_count(self, execute):
        result = await execute("{ recentPosts(count: -1) { title } }")
        assert error_code(result) == "VALIDATION_FAILED"

    @pytest.mark.asyncio
    async def test_author_removed_after_posting(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]
        post = await create_post(execute, author_id, "Orphaned")

        await execute(REMOVE_AUTHOR, {"input": {"id": author_id}})
        result = await execute("query($id: ID!) { node(id: $id) { ... on Post { author { name } } } }", {"id": post["id"]})

        assert result.errors is None
        assert result.data["node"]["author"] is None


class TestComments:
    @pytest.mark.asyncio
    async def test_comments_and_replies(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]
        post = await create_post(execute, author_id, "Discussed")

        result = await execute(
            ADD_COMMENT,
            {"input": {"postId": post["id"], "authorId": author_id, "content": "First", "clientMutationId": "c1"}},
        )
        assert result.errors is None
        payload = result.data["addComment"]
        assert payload["clientMutationId"] == "c1"
        assert payload["post"]["title"] == "Discussed"
        assert payload["commentEdge"]["cursor"] == offset_to_cursor(0)
        assert payload["commentEdge"]["node"]["author"] == {"name": "Jane"}
        parent_id = payload["commentEdge"]["node"]["id"]

        result = await execute(
            ADD_COMMENT,
            {"input": {"postId": post["id"], "authorId": author_id, "content": "Reply", "parentId": parent_id}},
        )
        assert result.errors is None

        query = """
        query($id: ID!) {
            node(id: $id) {
                ... on Post {
                    comments(first: 10) {
                        edges { node { content replies { content } } }
                        pageInfo { hasNextPage }
                    }
                }
            }
        }
        """
        result = await execute(query, {"id": post["id"]})
        assert result.errors is None
        comments = result.data["node"]["comments"]
        assert comments["edges"] == [{"node": {"content": "First", "replies": [{"content": "Reply"}]}}]
        assert comments["pageInfo"]["hasNextPage"] is False

    @pytest.mark.asyncio
    async def test_comment_on_unknown_post(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]

        result = await execute(
            ADD_COMMENT,
            {"input": {"postId": to_global_id("Post", 999), "authorId": author_id, "content": "Hi"}},
        )

        assert error_code(result) == "RESOURCE_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_post_id_of_wrong_type(self, execute):
        author_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]

        result = await execute(ADD_COMMENT, {"input": {"postId": author_id, "authorId": author_id, "content": "Hi"}})

        assert error_code(result) == "VALIDATION_FAILED"


class TestRemovedAuthorIds:
    @pytest.mark.asyncio
    async def test_removed_id_is_never_reused(self, execute):
        jane_id = (await add_author(execute, "Jane"))["authorEdge"]["node"]["id"]
        post = await create_post(execute, jane_id, "By Jane")

        await execute(REMOVE_AUTHOR, {"input": {"id": jane_id}})
        bob_id = (await add_author(execute, "Bob"))["authorEdge"]["node"]["id"]

        assert bob_id != jane_id

        result = await execute(NODE_QUERY, {"id": jane_id})
        assert result.errors is None
        assert result.data["node"] is None

        result = await execute("query($id: ID!) { node(id: $id) { ... on Post { author { id } } } }", {"id": post["id"]})
        assert result.errors is None
        assert result.data["node"]["author"] is None


class TestOversizedLocalIds:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("local_id", ["9" * 30, str(2**31), str(2**63)])
    async def test_node_is_null(self, execute, local_id):
        result = await execute(NODE_QUERY, {"id": to_global_id("Author", local_id)})

        assert result.errors is None
        assert result.data["node"] is None

    @pytest.mark.asyncio
    async def test_remove_author_is_a_no_op(self, execute):
        author_id = to_global_id("Author", "9" * 30)

        result = await execute(REMOVE_AUTHOR, {"input": {"id": author_id}})

        assert result.errors is None
        assert result.data["removeAuthor"]["deletedId"] == author_id
