from .comment import Comment
from .post import Post, post_attachments, post_categories
from .post_type import PostType
from .taxonomy import Category, Media

__all__ = [
    "Category",
    "Comment",
    "Media",
    "Post",
    "PostType",
    "post_attachments",
    "post_categories",
]
