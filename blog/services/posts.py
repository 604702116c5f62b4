import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import List, Optional, Tuple

import markdown
import yaml

from ..core.validation import RESERVED_SLUGS, validate_slug


logger = logging.getLogger(__name__)

MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc"]
WORDS_PER_MINUTE = 200
FRONT_MATTER_DELIMITER = "---"


class PostParseError(ValueError):
    """A markdown file could not be turned into a Post."""

    def __init__(self, path, message: str):
        self.path = path
        super().__init__(f"{path}: {message}")


@dataclass(frozen=True)
class Post:
    slug: str
    title: str
    publish_date: date
    body: str
    html: str
    snippet: str = ""
    tags: Tuple[str, ...] = field(default_factory=tuple)


def parse_front_matter(text: str, path="<string>") -> Tuple[dict, str]:
    """Split a document into its YAML front matter and markdown body."""
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        raise PostParseError(path, "missing front matter")

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == FRONT_MATTER_DELIMITER:
            end = i
            break
    if end is None:
        raise PostParseError(path, "front matter is not closed")

    try:
        meta = yaml.safe_load("\n".join(lines[1:end])) or {}
    except yaml.YAMLError as e:
        raise PostParseError(path, f"invalid front matter: {e}")
    if not isinstance(meta, dict):
        raise PostParseError(path, "front matter must be a mapping")

    body = "\n".join(lines[end + 1:]).strip("\n")
    return meta, body


def parse_publish_date(value, path="<string>") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.endswith(("Z", "z")):
            # fromisoformat only accepts a Z suffix from 3.11 on
            raw = raw[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(raw).date() if "T" in raw or " " in raw else date.fromisoformat(raw)
        except ValueError:
            pass
    raise PostParseError(path, f"invalid publish_date: {value!r}")


def parse_tags(value) -> Tuple[str, ...]:
    if not value:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(tag).strip() for tag in value if str(tag).strip())


def render_markdown(body: str) -> str:
    return markdown.markdown(body, extensions=MARKDOWN_EXTENSIONS)


def load_post(path: Path) -> Post:
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise PostParseError(path, f"not valid UTF-8: {e}")
    meta, body = parse_front_matter(text, path)

    slug = path.stem
    try:
        validate_slug(slug)
    except ValueError as e:
        raise PostParseError(path, str(e))
    if slug in RESERVED_SLUGS:
        raise PostParseError(path, f"reserved slug: {slug}")

    title = meta.get("title")
    if not isinstance(title, str) or not title.strip():
        raise PostParseError(path, "title is required")
    if "publish_date" not in meta:
        raise PostParseError(path, "publish_date is required")

    return Post(
        slug=slug,
        title=title.strip(),
        publish_date=parse_publish_date(meta["publish_date"], path),
        body=body,
        html=render_markdown(body),
        snippet=str(meta.get("snippet") or "").strip(),
        tags=parse_tags(meta.get("tags")),
    )


def load_posts(directory: Path) -> List[Post]:
    """Load every `*.md` file in `directory`, newest first."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Posts directory not found: {directory}")

    posts = [load_post(path) for path in sorted(directory.glob("*.md"))]
    posts.sort(key=lambda post: post.slug)
    posts.sort(key=lambda post: post.publish_date, reverse=True)
    logger.info(f"Loaded {len(posts)} posts from {directory}")
    return posts


def find_post(posts: List[Post], slug: str) -> Optional[Post]:
    for post in posts:
        if post.slug == slug:
            return post
    return None


def reading_minutes(post: Post) -> int:
    words = len(re.findall(r"\S+", post.body))
    return max(1, math.ceil(words / WORDS_PER_MINUTE))
