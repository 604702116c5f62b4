"""Shared fixtures for blog tests."""

from pathlib import Path
from typing import Callable

import pytest
from fastapi.testclient import TestClient

from blog import BlogSettings, Link, create_app
from blog.core.config import Config


@pytest.fixture(autouse=True)
def production_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the environment so a local `.env` cannot change route behaviour."""
    monkeypatch.setattr(Config, "ENVIRONMENT", "production")


@pytest.fixture
def write_post(tmp_path: Path) -> Callable[..., Path]:
    """Write a markdown post into `tmp_path / "posts"` and return its path."""
    posts_dir = tmp_path / "posts"
    posts_dir.mkdir(exist_ok=True)

    def _write(slug: str, title: str = "A post", publish_date: str = "2022-01-01", body: str = "Hello.", extra: str = "") -> Path:
        path = posts_dir / f"{slug}.md"
        path.write_text(
            f"---\ntitle: {title}\npublish_date: {publish_date}\n{extra}---\n\n{body}\n",
            encoding="utf-8",
        )
        return path

    return _write


@pytest.fixture
def posts_dir(tmp_path: Path, write_post: Callable[..., Path]) -> Path:
    write_post("older-post", title="Older Post", publish_date="2022-01-05", body="First words.")
    write_post(
        "newer-post",
        title="Newer Post",
        publish_date="2022-03-01",
        body="# Heading\n\nSome `code` and more words.",
        extra="snippet: The newest one.\ntags: [react, snippets]\n",
    )
    return tmp_path / "posts"


@pytest.fixture
def static_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "static"
    directory.mkdir()
    (directory / "avatar.png").write_bytes(b"\x89PNG\r\n\x1a\nfake")
    (directory / "secrets.env").write_text("TOKEN=nope", encoding="utf-8")
    return directory


@pytest.fixture
def settings() -> BlogSettings:
    return BlogSettings(
        title="Test Blog",
        author="Tester",
        avatar="./avatar.png",
        avatar_class="full",
        links=[Link(title="GitHub", url="https://github.com/example")],
        lang="en",
        description="Notes and snippets.",
    )


@pytest.fixture
def client(settings: BlogSettings, posts_dir: Path, static_dir: Path) -> TestClient:
    app = create_app(settings, posts_dir=posts_dir, static_dir=static_dir)
    return TestClient(app)
