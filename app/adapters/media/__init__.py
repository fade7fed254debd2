"""Media storage adapters for uploaded and generated images."""

from app.adapters.media.base import AbstractMediaStore
from app.adapters.media.local import LocalMediaStore

__all__ = [
    "AbstractMediaStore",
    "LocalMediaStore",
]
