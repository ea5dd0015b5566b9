"""Closed set of node variants reachable through `node(id)`."""

import enum


class NodeKind(str, enum.Enum):
    """
    Explicit type tag carried by every domain object.

    The value doubles as the GraphQL type name and as the type component of
    a global ID.
    """

    USER = "User"
    AUTHOR = "Author"
    POST = "Post"
    COMMENT = "Comment"
