"""Version-control helpers."""

from .publisher import Publisher

__all__ = ["Publisher"]
