from .author_service import AuthorService
from .comment_service import CommentService
from .post_service import PostService

__all__ = [
    "AuthorService",
    "CommentService",
    "PostService",
]
