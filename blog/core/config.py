import os
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional

from dotenv import load_dotenv
from starlette.requests import Request
from starlette.responses import Response


load_dotenv()

Middleware = Callable[[Request, Callable[[Request], Awaitable[Response]]], Awaitable[Response]]


@dataclass(frozen=True)
class Config:
    """Process configuration loaded from environment variables (and `.env`)."""

    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "production")
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: str = os.getenv("PORT", "8080")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING")
    POSTS_DIR: str = os.getenv("POSTS_DIR", "posts")
    STATIC_DIR: str = os.getenv("STATIC_DIR", ".")

    @classmethod
    def port(cls) -> int:
        try:
            return int(cls.PORT)
        except ValueError:
            raise ValueError(f"PORT must be a number, got {cls.PORT!r}")

    @classmethod
    def is_development(cls) -> bool:
        return cls.ENVIRONMENT == "development"

    @classmethod
    def validate(cls) -> None:
        cls.port()
        if not os.path.isdir(cls.POSTS_DIR):
            raise ValueError(f"POSTS_DIR does not exist: {cls.POSTS_DIR}")


@dataclass(frozen=True)
class Link:
    title: str
    url: str


@dataclass(frozen=True)
class BlogSettings:
    """Site metadata and request hooks, built once at startup.

    `avatar` may be a URL or a path relative to the static directory
    (`./snoop.jpg`). `avatar_class` is `full` for a round avatar, `rounded`
    for a rounded square, or any other CSS class.
    """

    title: str
    author: str = ""
    avatar: Optional[str] = None
    avatar_class: str = "full"
    links: List[Link] = field(default_factory=list)
    lang: str = "en"
    middlewares: List[Middleware] = field(default_factory=list)
    description: str = ""
    favicon: Optional[str] = None
    canonical_url: Optional[str] = None
    reading_time: bool = False

    @property
    def avatar_url(self) -> Optional[str]:
        return _public_url(self.avatar)

    @property
    def favicon_url(self) -> Optional[str]:
        return _public_url(self.favicon)

    def validate(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Blog title is required")
        for link in self.links:
            if not link.title or not link.url:
                raise ValueError(f"Link needs both a title and a url: {link!r}")


def _public_url(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    if "://" in path or path.startswith(("/", "data:", "mailto:")):
        return path
    if path.startswith("./"):
        path = path[2:]
    return "/" + path
