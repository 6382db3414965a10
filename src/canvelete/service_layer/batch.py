"""Batch rendering and multi-format export.

Both engines work through their items one at a time and tolerate per-item
failures: a failed item is recorded in the summary and the next item runs.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path

from canvelete.domain.errors import CanveleteError, ValidationError
from canvelete.domain.utils import parse_json_text
from canvelete.domain.value_objects import BatchItem, RenderFormat
from canvelete.files import write_atomic
from canvelete.interfaces.api_errors import ApiError
from canvelete.interfaces.render_api import RenderApi

from .render import RenderOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_PARALLEL = 3
EXPORT_QUALITY = 100

EXAMPLE_BATCH = [
    {"designId": "design-1", "format": "png", "output": "output1.png"},
    {"designId": "design-2", "format": "pdf", "output": "output2.pdf", "data": {"name": "John"}},
]


@dataclass(frozen=True)
class BatchItemResult:
    """Outcome of one batch item (identified by its position)."""

    position: int
    label: str
    output: Path | None = None
    size: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        """True when the item's output was written."""
        return self.error is None


@dataclass
class BatchSummary:
    """Totals of a batch run."""

    parallel: int = DEFAULT_PARALLEL
    results: list[BatchItemResult] = field(default_factory=list)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.results if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if not r.ok)

    @property
    def total(self) -> int:
        return len(self.results)


ResultCallback = Callable[[BatchItemResult], None]


def load_batch_file(path: str | os.PathLike[str]) -> list[BatchItem]:
    """Read a batch file: a non-empty JSON array of render objects.

    Elements that are not render objects are kept as items that fail when
    the batch runs.

    Raises:
        OSError: If the file cannot be read.
        DataParseError: If the file is not valid JSON.
        ValidationError: If the document is not a non-empty array.
    """
    source = Path(path)
    document = parse_json_text(source.read_text(encoding="utf-8"), source.name)
    if not isinstance(document, list) or not document:
        raise ValidationError("Batch file must contain an array of render configurations")
    return [BatchItem.from_mapping(entry, position) for position, entry in enumerate(document)]


class BatchEngine:
    """Renders batch items into an output directory.

    Args:
        orchestrator: Renders each item.
        output_dir: Base directory of relative item outputs.
        parallel: Requested concurrency; recorded in the summary, items are
            rendered one after another.
        on_result: Called after every item.
    """

    def __init__(
        self,
        orchestrator: RenderOrchestrator,
        output_dir: str | os.PathLike[str] = ".",
        *,
        parallel: int = DEFAULT_PARALLEL,
        on_result: ResultCallback | None = None,
    ) -> None:
        self.orchestrator = orchestrator
        self.output_dir = Path(output_dir)
        self.parallel = parallel
        self._on_result = on_result

    def output_path(self, item: BatchItem) -> Path:
        return self.output_dir / (item.output or item.default_output_name())

    async def run(self, items: Iterable[BatchItem]) -> BatchSummary:
        """Render every item; failures are recorded, never raised."""
        summary = BatchSummary(parallel=self.parallel)
        for position, item in enumerate(items):
            try:
                item.validate()
                data = await self.orchestrator.render_sync(item.request)
                output = write_atomic(self.output_path(item), data)
            except (CanveleteError, ApiError, OSError) as e:
                logger.debug("Batch item %d failed", position, exc_info=True)
                result = BatchItemResult(position, item.label, error=str(e))
            else:
                result = BatchItemResult(position, item.label, output=output, size=len(data))
            summary.results.append(result)
            if self._on_result is not None:
                self._on_result(result)

        logger.info("Batch complete: %d succeeded, %d failed", summary.succeeded, summary.failed)
        return summary


def parse_formats(value: str) -> list[str]:
    """Split a comma-separated format list, normalizing case and blanks."""
    return [f.strip().lower() for f in value.split(",") if f.strip()]


async def export_formats(
    api: RenderApi,
    design_id: str,
    formats: Iterable[str],
    output_dir: str | os.PathLike[str] = ".",
    *,
    on_result: ResultCallback | None = None,
) -> BatchSummary:
    """Export one design once per format into ``<output_dir>/<id[:8]>.<format>``.

    Unknown formats are reported as failed items without a request.
    """
    summary = BatchSummary(parallel=1)
    for position, fmt in enumerate(formats):
        output = Path(output_dir) / f"{design_id[:8]}.{fmt}"
        try:
            if fmt not in RenderFormat.values():
                raise ValidationError(f"Invalid format: {fmt}")
            data = await api.export_design(design_id, fmt, EXPORT_QUALITY)
            write_atomic(output, data)
        except (CanveleteError, ApiError, OSError) as e:
            logger.debug("Export to %s failed", fmt, exc_info=True)
            result = BatchItemResult(position, fmt.upper(), error=str(e))
        else:
            result = BatchItemResult(position, fmt.upper(), output=output, size=len(data))
        summary.results.append(result)
        if on_result is not None:
            on_result(result)
    return summary
