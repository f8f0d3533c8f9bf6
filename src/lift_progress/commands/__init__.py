"""CLI commands for lift-progress."""

from .init import init
from .log import log
from .progress import progress
from .select import select
from .serve import serve
from .target import target

__all__ = [
    "init",
    "log",
    "progress",
    "select",
    "serve",
    "target",
]
