"""Local persistence for the favorites library."""

from .favorites import FavoritesLibrary
from .storage import KeyValueStore

__all__ = ["FavoritesLibrary", "KeyValueStore"]
