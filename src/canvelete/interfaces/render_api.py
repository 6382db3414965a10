"""Render API interface definitions."""

import abc
from typing import Any


class RenderApi(abc.ABC):
    """The subset of the Canvelete API that render orchestration relies on.

    Payloads are the JSON bodies sent to the server; implementations raise
    `api_errors.HttpError` on non-2xx responses.
    """

    @abc.abstractmethod
    async def render(self, payload: dict[str, Any]) -> bytes:
        """Render synchronously and return the binary image/PDF payload."""

    @abc.abstractmethod
    async def render_async(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Submit an async render; return the job metadata as sent by the server."""

    @abc.abstractmethod
    async def get_render_status(self, job_id: str) -> dict[str, Any]:
        """Fetch the current status document of an async render job."""

    @abc.abstractmethod
    async def export_design(
        self, design_id: str, format: str = "png", quality: int = 100  # pylint: disable=redefined-builtin
    ) -> bytes:
        """Export a design to a binary file in the requested format."""
