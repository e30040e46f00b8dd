"""Kida environment setup and app binding.

Creates a kida Environment from roost's AppConfig and binds
user-registered globals. The environment is created once during
``App._freeze()`` and passed through the request pipeline.
"""

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from kida import Environment, FileSystemLoader

from roost.config import AppConfig
from roost.templating.returns import Fragment, Template


def create_environment(config: AppConfig, globals_: Mapping[str, Any]) -> Environment | None:
    """Create a kida Environment from app configuration.

    Returns ``None`` when ``config.template_dir`` does not exist. An
    app without templates still serves strings, JSON, and redirects.
    """
    template_dir = Path(config.template_dir)
    if not template_dir.is_dir():
        return None

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=config.autoescape,
        auto_reload=config.debug,
    )
    for name, value in globals_.items():
        env.add_global(name, value)
    return env


def render_template(env: Environment, tpl: Template) -> str:
    """Render a full template to string."""
    template = env.get_template(tpl.name)
    return template.render(tpl.context)


def render_fragment(env: Environment, frag: Fragment) -> str:
    """Render a named block from a template to string."""
    template = env.get_template(frag.template_name)
    return template.render_block(frag.block_name, frag.context)


def render_error_page(
    env: Environment | None,
    config: AppConfig,
    status: int,
    detail: str,
) -> str | None:
    """Render ``errors/<status>.html`` if the app ships one.

    Returns ``None`` when there is no template environment or no page
    for this status, so the caller can fall back to a plain body.
    """
    if env is None:
        return None
    name = f"errors/{status}.html"
    if not (Path(config.template_dir) / name).is_file():
        return None
    return env.get_template(name).render({"status": status, "detail": detail})
