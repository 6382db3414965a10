"""Contains concrete implementations of the ChangeSource interface."""

from .memory import MemoryChangeSource
from .polling import PollingChangeSource

__all__ = ["MemoryChangeSource", "PollingChangeSource"]
