"""Release manifest tracking and aggregate versioning."""

__version__ = "0.3.0"
