"""Command-line interface for the bundled example entities."""

from .app import app

__all__ = ["app"]
