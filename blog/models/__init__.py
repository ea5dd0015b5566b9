from .author import Author
from .comment import Comment
from .node_kind import NodeKind
from .post import Post, PostCategory

__all__ = [
    "Author",
    "Comment",
    "NodeKind",
    "Post",
    "PostCategory",
]
