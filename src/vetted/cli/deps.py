"""Shared CLI dependency helpers."""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

import typer
from dotenv import load_dotenv

from vetted.config import AppSettings, get_settings, reset_settings
from vetted.entity import EntityRegistry
from vetted.models import build_registry


@lru_cache(maxsize=1)
def get_registry() -> EntityRegistry:
    """Return a cached registry of entity kinds for CLI commands."""

    return build_registry()


def bootstrap(env_file: Path | None = None) -> AppSettings:
    """Load ``.env`` overrides, refresh settings and configure logging."""

    if env_file is not None and not env_file.is_file():
        raise typer.BadParameter(f"env file {env_file} does not exist", param_hint="--env-file")
    env_path = env_file or Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=False)
        reset_settings()
    settings = get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    return settings


def reset_cli_state() -> None:
    """Clear cached registry and settings (useful for tests)."""

    get_registry.cache_clear()
    reset_settings()
