"""
Static page rendering.

This module renders the aggregated posts into `index.html` using the
Jinja2 templates shipped in the package's templates directory.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .config import AppConfig
from .errors import FatalSetupError
from .types import Post


def build_environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(Path(__file__).parent / "templates")),
        autoescape=select_autoescape(["html"]),
    )


def render_html(
    posts: list[Post],
    cfg: AppConfig,
    site_dir: Path,
    now: datetime | None = None,
) -> Path:
    """Render posts as `<site_dir>/index.html`.

    Args:
        posts: Posts in display order
        cfg: Application configuration (title, description, feeds, config_url)
        site_dir: Output directory, created if missing
        now: Generation time shown on the page (defaults to current UTC time)

    Returns:
        Path to the written HTML file

    Raises:
        FatalSetupError: If the output directory cannot be created
    """
    if not site_dir.exists():
        try:
            site_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FatalSetupError(f"Could not create the '{site_dir}' folder: {exc}") from exc

    if now is None:
        now = datetime.now(timezone.utc).replace(microsecond=0)

    template = build_environment().get_template("index.html")
    html = template.render(
        config=cfg,
        posts=posts,
        title=cfg.title,
        description=cfg.description,
        now=now.strftime("%Y-%m-%d %H:%M:%S"),
        total=len(posts),
    )

    output_path = site_dir / "index.html"
    output_path.write_text(html + "\n", encoding="utf-8")
    return output_path
