"""Storage backends for lift-progress."""

from .base import BaseProgressStorage, ProgressStorage
from .memory import InMemoryProgressStorage
from .sqlite import SqliteProgressStorage

__all__ = [
    "BaseProgressStorage",
    "InMemoryProgressStorage",
    "ProgressStorage",
    "SqliteProgressStorage",
]
