"""Contains concrete implementations of the ConfigStore interface."""

from .json_file import JsonConfigStore
from .memory import InMemoryConfigStore

__all__ = ["InMemoryConfigStore", "JsonConfigStore"]
