"""Contains concrete implementations of the ProfileStore interface."""

from .json_file import JsonProfileStore
from .memory import InMemoryProfileStore

__all__ = ["InMemoryProfileStore", "JsonProfileStore"]
