"""Shared test fixtures for Mummy."""

from __future__ import annotations

import random
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from mummy.core.context import MummyContext
from mummy.core.driver import MummificationDriver
from mummy.core.plan import MummyPlan
from mummy.core.planner import Planner
from mummy.models.config import SiteConfig


@pytest.fixture
def site_dir(tmp_path: Path) -> Path:
    """Provide an empty site source directory."""
    path = tmp_path / "site"
    path.mkdir()
    return path


@pytest.fixture
def target_dir(tmp_path: Path) -> Path:
    """Provide a (not yet created) site target directory."""
    return tmp_path / "target"


@pytest.fixture
def write_file(site_dir: Path) -> Callable[[str, str], Path]:
    """Factory fixture: write a text file below the site directory."""

    def _write(relative: str, text: str = "") -> Path:
        path = site_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_context(site_dir: Path, target_dir: Path) -> Callable[..., MummyContext]:
    """Factory fixture: a context for the site, with configuration overrides."""

    def _factory(**config: Any) -> MummyContext:
        return MummyContext(site_dir, target_dir, SiteConfig(**config))

    return _factory


@pytest.fixture
def context(make_context: Callable[..., MummyContext]) -> MummyContext:
    """Provide a context with the default site configuration."""
    return make_context()


@pytest.fixture
def build() -> Callable[[MummyContext], MummyPlan]:
    """Factory fixture: plan and mummify the context's site sequentially."""

    def _build(context: MummyContext, workers: int = 1) -> MummyPlan:
        plan = Planner(context).plan()
        MummificationDriver(context, workers).mummify(plan)
        return plan

    return _build


@pytest.fixture
def blog_site(write_file: Callable[[str, str], Path], site_dir: Path) -> Path:
    """A site with a `blog` directory holding two pages and no content file."""
    write_file("blog/post1.html", "<html><head><title>Post One</title></head><body><p>One.</p></body></html>")
    write_file("blog/post2.html", "<html><head><title>Post Two</title></head><body><p>Two.</p></body></html>")
    return site_dir


@pytest.fixture
def make_image() -> Callable[..., Path]:
    """Factory fixture: write an image of random pixels.

    Noise compresses poorly, so even modest dimensions give large files.
    """

    def _factory(
        path: Path,
        size: tuple[int, int] = (64, 48),
        image_format: str = "JPEG",
        **save_options: Any,
    ) -> Path:
        rng = random.Random(42)
        data = rng.randbytes(size[0] * size[1] * 3)
        path.parent.mkdir(parents=True, exist_ok=True)
        image = Image.frombytes("RGB", size, data)
        if image_format == "JPEG":
            save_options.setdefault("quality", 95)
        image.save(path, format=image_format, **save_options)
        return path

    return _factory
