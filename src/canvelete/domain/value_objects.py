"""Value objects used across the domain layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .errors import DataParseError, ValidationError

DEFAULT_FORMAT = "png"
DEFAULT_QUALITY = 90


class RenderFormat(Enum):
    """Output formats accepted by the render endpoints."""

    PNG = "png"
    JPG = "jpg"
    JPEG = "jpeg"
    PDF = "pdf"
    SVG = "svg"

    @classmethod
    def values(cls) -> list[str]:
        """Return the accepted format strings in declaration order."""
        return [member.value for member in cls]


class JobStatus(Enum):
    """Server-side state of an asynchronous render job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        """True for states the job never leaves."""
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass(frozen=True)
class RenderRequest:
    """A render of exactly one design or template.

    `quality` is passed to the server as given; the server decides what to do
    with values outside 1..100. `width`/`height` are only sent when set.
    """

    design_id: str | None = None
    template_id: str | None = None
    format: str = DEFAULT_FORMAT
    quality: int = DEFAULT_QUALITY
    width: int | None = None
    height: int | None = None
    dynamic_data: Any = None

    @property
    def target_id(self) -> str:
        """The design or template id this request renders."""
        return self.design_id or self.template_id or ""

    def validate(self) -> None:
        """Check the request before it is sent.

        Raises:
            ValidationError: If not exactly one of design/template is set, or
                the format is not a known render format.
        """
        if not self.design_id and not self.template_id:
            raise ValidationError("Either a design id or a template id is required")
        if self.design_id and self.template_id:
            raise ValidationError("Specify a design id or a template id, not both")
        if not isinstance(self.format, str) or self.format.lower() not in RenderFormat.values():
            raise ValidationError(
                f"Invalid format: {self.format} "
                f"(valid formats: {', '.join(RenderFormat.values())})"
            )

    def to_payload(self, *, async_: bool = False) -> dict[str, Any]:
        """Build the JSON body for the render endpoints."""
        payload: dict[str, Any] = {
            "format": self.format.lower(),
            "quality": self.quality,
        }
        if async_:
            payload["async"] = True
        if self.design_id:
            payload["designId"] = self.design_id
        if self.template_id:
            payload["templateId"] = self.template_id
        if self.dynamic_data is not None:
            payload["dynamicData"] = self.dynamic_data
        if self.width is not None:
            payload["width"] = self.width
        if self.height is not None:
            payload["height"] = self.height
        return payload


def _unwrap(payload: Any) -> dict[str, Any]:
    """Return the `data` envelope of an API response, or the response itself."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    if isinstance(payload, dict):
        return payload
    raise DataParseError("API response", f"expected an object, got {type(payload).__name__}")


def _parse_status(value: Any) -> JobStatus:
    try:
        return JobStatus(str(value).lower())
    except ValueError:
        raise DataParseError("API response", f"unknown job status {value!r}") from None


@dataclass(frozen=True)
class AsyncRenderTicket:
    """What the server answers when an async render is submitted."""

    job_id: str
    status: JobStatus
    estimated_time: float | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> AsyncRenderTicket:
        """Build a ticket from the async render response."""
        data = _unwrap(payload)
        return cls(
            job_id=str(data.get("jobId") or data.get("id") or ""),
            status=_parse_status(data.get("status", JobStatus.PENDING.value)),
            estimated_time=data.get("estimatedTime"),
        )


@dataclass(frozen=True)
class RenderJob:
    """Snapshot of an async render job as observed by one status poll."""

    job_id: str
    status: JobStatus
    output_url: str | None = None
    error: str | None = None
    estimated_time: float | None = None
    format: str | None = None

    @classmethod
    def from_payload(cls, payload: Any) -> RenderJob:
        """Build a job from the render status response."""
        data = _unwrap(payload)
        return cls(
            job_id=str(data.get("jobId") or data.get("id") or ""),
            status=_parse_status(data.get("status")),
            output_url=data.get("outputUrl"),
            error=data.get("error"),
            estimated_time=data.get("estimatedTime"),
            format=data.get("format"),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly view of the job."""
        return {
            "jobId": self.job_id,
            "status": self.status.value,
            "outputUrl": self.output_url,
            "error": self.error,
            "estimatedTime": self.estimated_time,
            "format": self.format,
        }


@dataclass(frozen=True)
class BatchItem:
    """One entry of a batch file: a render plus an optional output override.

    Entries that cannot describe a render keep the reason in `problem`; they
    fail `validate()` when their turn comes instead of rejecting the file.
    """

    request: RenderRequest
    output: str | None = None
    problem: str | None = None

    @classmethod
    def from_mapping(cls, entry: Any, position: int) -> BatchItem:
        """Build an item from one element of a batch file.

        Accepted keys: designId, templateId, format, quality, data, width,
        height, output.
        """
        if not isinstance(entry, dict):
            return cls(
                request=RenderRequest(),
                problem=f"Item {position}: expected an object, got {type(entry).__name__}",
            )
        output = entry.get("output")
        if output is not None and not isinstance(output, str):
            return cls(
                request=RenderRequest(),
                problem=f"Item {position}: output must be a string",
            )
        return cls(
            request=RenderRequest(
                design_id=entry.get("designId"),
                template_id=entry.get("templateId"),
                format=entry.get("format") or DEFAULT_FORMAT,
                quality=entry.get("quality") or DEFAULT_QUALITY,
                width=entry.get("width"),
                height=entry.get("height"),
                dynamic_data=entry.get("data"),
            ),
            output=output,
        )

    def validate(self) -> None:
        """Raise `ValidationError` for malformed entries, then check the request."""
        if self.problem is not None:
            raise ValidationError(self.problem)
        self.request.validate()

    @property
    def label(self) -> str:
        """Short name used in progress output."""
        return self.output or self.request.target_id or "<missing id>"

    def default_output_name(self) -> str:
        """`<designId>.<format>` (the template id when only a template is set)."""
        return f"{self.request.target_id}.{self.request.format}"
