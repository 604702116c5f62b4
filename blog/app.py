import logging
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import FileResponse
from fastapi.templating import Jinja2Templates
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import BlogSettings, Config
from .core.middleware import global_exception_handler, log_requests
from .core.validation import resolve_static_file
from .services.posts import Post, find_post, load_posts, reading_minutes

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent / "templates"


def long_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def atom_date(value: date) -> str:
    return f"{value.isoformat()}T00:00:00Z"


templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["long_date"] = long_date
templates.env.filters["atom_date"] = atom_date

router = APIRouter()


def get_posts(request: Request) -> List[Post]:
    """Posts loaded at startup, or re-read from disk in development."""
    if Config.is_development():
        return load_posts(request.app.state.posts_dir)
    return request.app.state.posts


@router.get("/")
async def index(request: Request, tag: Optional[str] = None):
    posts = get_posts(request)
    if tag:
        posts = [post for post in posts if tag in post.tags]
    return templates.TemplateResponse(
        request,
        "index.html",
        {"settings": request.app.state.settings, "posts": posts, "tag": tag},
    )


@router.get("/feed")
async def feed(request: Request):
    """Atom feed of every post, newest first."""
    settings: BlogSettings = request.app.state.settings
    posts = get_posts(request)
    base_url = (settings.canonical_url or str(request.base_url)).rstrip("/")
    updated = atom_date(posts[0].publish_date) if posts else datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    return templates.TemplateResponse(
        request,
        "feed.xml",
        {"settings": settings, "posts": posts, "base_url": base_url, "updated": updated},
        media_type="application/atom+xml",
    )


@router.get("/health")
async def health_check(request: Request):
    """Basic liveness check with the number of posts being served."""
    return {
        "status": "healthy",
        "service": "blog",
        "posts": len(get_posts(request)),
        "timestamp": datetime.now().isoformat(),
    }


@router.get("/{name}")
async def post_or_file(request: Request, name: str):
    settings: BlogSettings = request.app.state.settings
    post = find_post(get_posts(request), name)
    if post is not None:
        return templates.TemplateResponse(
            request,
            "post.html",
            {
                "settings": settings,
                "post": post,
                "reading_minutes": reading_minutes(post) if settings.reading_time else None,
            },
        )

    static_file = resolve_static_file(request.app.state.static_dir, name)
    if static_file is not None:
        return FileResponse(static_file)

    raise HTTPException(status_code=404, detail="Not found")


async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code != 404:
        return await http_exception_handler(request, exc)
    return templates.TemplateResponse(
        request,
        "404.html",
        {"settings": request.app.state.settings, "path": request.url.path},
        status_code=404,
    )


def create_app(
    settings: BlogSettings,
    posts_dir: Optional[Path] = None,
    static_dir: Optional[Path] = None,
) -> FastAPI:
    """Build the blog application for `settings`.

    Posts are loaded once here, so a malformed post fails startup.
    """
    settings.validate()
    posts_dir = Path(posts_dir or Config.POSTS_DIR)
    static_dir = Path(static_dir or Config.STATIC_DIR)

    app = FastAPI(title=settings.title, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.settings = settings
    app.state.posts_dir = posts_dir
    app.state.static_dir = static_dir
    app.state.posts = load_posts(posts_dir)

    # Starlette wraps each new middleware around the previous ones
    for middleware in reversed(settings.middlewares):
        app.middleware("http")(middleware)
    app.middleware("http")(log_requests)

    app.add_exception_handler(StarletteHTTPException, not_found_handler)
    app.add_exception_handler(Exception, global_exception_handler)
    app.include_router(router)

    logger.info(f"Blog '{settings.title}' ready with {len(app.state.posts)} posts")
    return app
