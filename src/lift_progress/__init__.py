"""lift-progress: workout progress aggregation and analytics."""

__version__ = "0.1.0"
