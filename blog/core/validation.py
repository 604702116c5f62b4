import logging
import os
import re
from pathlib import Path
from typing import Optional


logger = logging.getLogger(__name__)

SLUG_PATTERN = re.compile(r'^[a-zA-Z0-9_-]+$')
TRACKING_ID_PATTERN = re.compile(r'^(G|UA)-[A-Z0-9-]+$')
# Paths served by dedicated routes, never by a post
RESERVED_SLUGS = {'feed', 'health'}
ALLOWED_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.webp', '.gif', '.svg', '.ico'}


def validate_slug(slug: str) -> None:
    if not slug or not SLUG_PATTERN.match(slug):
        raise ValueError(f"Invalid slug format: {slug!r}")


def validate_tracking_id(tracking_id: str) -> None:
    if not tracking_id or not TRACKING_ID_PATTERN.match(tracking_id):
        raise ValueError(f"Invalid analytics tracking ID: {tracking_id!r}")


def resolve_static_file(static_dir: Path, name: str) -> Optional[Path]:
    """Map a request path segment to an image/icon in `static_dir`, or None."""
    if not name or '..' in name or '/' in name or '\\' in name:
        logger.warning(f"Rejected static path: {name!r}")
        return None

    file_ext = os.path.splitext(name.lower())[1]
    if file_ext not in ALLOWED_EXTENSIONS:
        return None

    candidate = (static_dir / name).resolve()
    if candidate.parent != static_dir.resolve() or not candidate.is_file():
        logger.debug(f"Static file not found: {name}")
        return None
    return candidate
