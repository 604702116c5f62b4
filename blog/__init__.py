"""A small markdown blog served with FastAPI.

Build a `BlogSettings`, pass it to `blog()`, and every markdown file in the
posts directory becomes a page.
"""

from .app import create_app
from .core.config import BlogSettings, Config, Link
from .core.middleware import ga
from .main import blog
from .services.posts import Post, PostParseError, load_post, load_posts

__all__ = [
    "BlogSettings",
    "Config",
    "Link",
    "Post",
    "PostParseError",
    "blog",
    "create_app",
    "ga",
    "load_post",
    "load_posts",
]
