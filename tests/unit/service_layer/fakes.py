"""In-memory fakes for the service-layer tests."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from canvelete.interfaces.api_errors import HttpError
from canvelete.interfaces.render_api import RenderApi


class FakeRenderApi(RenderApi):
    """Scripted RenderApi that records every call.

    Args:
        statuses: Successive answers of `get_render_status`; the last one
            repeats once the script is exhausted.
        failing: Design/template ids whose renders and exports answer 500.
    """

    def __init__(
        self,
        statuses: Iterable[dict[str, Any]] = (),
        failing: Iterable[str] = (),
    ) -> None:
        self.statuses = list(statuses)
        self.failing = set(failing)
        self.render_payloads: list[dict[str, Any]] = []
        self.status_calls = 0
        self.exports: list[tuple[str, str, int]] = []
        self.designs: dict[str, dict[str, Any]] = {}

    async def render(self, payload: dict[str, Any]) -> bytes:
        self.render_payloads.append(payload)
        target = payload.get("designId") or payload.get("templateId")
        if target in self.failing:
            raise HttpError(500, f"cannot render {target}")
        return f"{target}:{payload['format']}:{len(self.render_payloads)}".encode()

    async def render_async(self, payload: dict[str, Any]) -> dict[str, Any]:
        self.render_payloads.append(payload)
        return {"data": {"jobId": "job-1", "status": "pending", "estimatedTime": 5}}

    async def get_render_status(self, job_id: str) -> dict[str, Any]:
        index = min(self.status_calls, len(self.statuses) - 1)
        self.status_calls += 1
        return {"jobId": job_id, **self.statuses[index]}

    async def export_design(self, design_id: str, format: str = "png", quality: int = 100) -> bytes:  # pylint: disable=redefined-builtin
        self.exports.append((design_id, format, quality))
        if format in self.failing:
            raise HttpError(422, f"{format} not supported")
        return f"{design_id}.{format}".encode()

    async def get_design(self, design_id: str) -> Any:
        return {"data": self.designs[design_id]}


class FakeClock:
    """Monotonic clock advanced by `FakeSleep`."""

    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class FakeSleep:
    """Awaitable sleep that only advances a `FakeClock` and records durations."""

    def __init__(self, clock: FakeClock) -> None:
        self.clock = clock
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)
        self.clock.now += seconds
