"""Web interface for lift-progress."""

from .app import create_app

__all__ = ["create_app"]
