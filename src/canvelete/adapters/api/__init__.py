"""HTTP adapters for the Canvelete REST API."""

from .client import CanveleteClient

__all__ = ["CanveleteClient"]
