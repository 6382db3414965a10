"""Project scaffolding (``init``) and project/data file checks (``validate``)."""

from __future__ import annotations

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from canvelete.domain.value_objects import DEFAULT_FORMAT, DEFAULT_QUALITY, RenderFormat
from canvelete.files import write_json_atomic

logger = logging.getLogger(__name__)

PROJECT_CONFIG_FILE = "canvelete.config.json"
DEFAULT_OUTPUT_DIR = "./output"
TEMPLATES = ("basic", "batch", "ci")

GITIGNORE_MARKER = "# Canvelete"
GITIGNORE_ENTRIES = [GITIGNORE_MARKER, "output/", "*.png", "*.jpg", "*.pdf", ".canvelete-cache/"]

EXAMPLE_DATA = [{"designId": "your-design-id", "output": "example.png", "data": {"name": "Example"}}]
EXAMPLE_DATA_FILE = Path("data") / "example-batch.json"


def default_project_config(
    name: str,
    *,
    default_format: str = DEFAULT_FORMAT,
    default_quality: int = DEFAULT_QUALITY,
    output_dir: str = DEFAULT_OUTPUT_DIR,
) -> dict[str, Any]:
    """The ``canvelete.config.json`` document written by ``init``."""
    return {
        "name": name,
        "version": "1.0.0",
        "canvelete": {
            "defaultFormat": default_format,
            "defaultQuality": default_quality,
            "outputDir": output_dir,
        },
        "designs": {},
        "templates": [],
        "batch": {"parallel": 3, "retryAttempts": 2},
    }


def apply_template(config: dict[str, Any], template: str | None) -> dict[str, Any]:
    """Return a copy of `config` with the template's sections added.

    ``basic`` (or no template) leaves the configuration unchanged.
    """
    config = copy.deepcopy(config)
    if template == "batch":
        config["batch"] = {
            "parallel": 5,
            "retryAttempts": 3,
            "outputPattern": "{{designId}}_{{timestamp}}.{{format}}",
        }
    elif template == "ci":
        config["ci"] = {
            "failOnError": True,
            "timeout": 300,
            "artifacts": ["output/*.png", "output/*.pdf"],
        }
    return config


def scaffold(root: str | os.PathLike[str], output_dir: str = DEFAULT_OUTPUT_DIR) -> list[Path]:
    """Create the project directories and the example batch file.

    Existing directories and files are left alone.

    Returns:
        The paths that were created.
    """
    base = Path(root)
    created: list[Path] = []
    for directory in (output_dir, "data", "templates"):
        path = base / directory
        if not path.exists():
            path.mkdir(parents=True)
            created.append(path)

    example = base / EXAMPLE_DATA_FILE
    if not example.exists():
        write_json_atomic(example, EXAMPLE_DATA)
        created.append(example)
    logger.debug("Scaffolded %d path(s) under %s", len(created), base)
    return created


def update_gitignore(root: str | os.PathLike[str]) -> str | None:
    """Add the Canvelete ignore block to ``.gitignore``.

    Returns:
        ``"created"``, ``"updated"``, or None when the block was already
        present.
    """
    path = Path(root) / ".gitignore"
    block = "\n".join(GITIGNORE_ENTRIES)
    if not path.exists():
        path.write_text(block + "\n", encoding="utf-8")
        return "created"

    existing = path.read_text(encoding="utf-8")
    if GITIGNORE_MARKER in existing:
        return None
    separator = "\n" if existing.endswith("\n") else "\n\n"
    with path.open("a", encoding="utf-8") as fh:
        fh.write(f"{separator if existing else ''}{block}\n")
    return "updated"


def validate_config(config: Any) -> list[str]:
    """List the problems of a project configuration (empty when valid)."""
    if not isinstance(config, dict):
        return ["Config must be a JSON object"]
    section = config.get("canvelete")
    if not isinstance(section, dict):
        return ['Missing "canvelete" section']

    issues = []
    quality = section.get("defaultQuality")
    if quality is not None and (
        not isinstance(quality, (int, float)) or isinstance(quality, bool) or not 1 <= quality <= 100
    ):
        issues.append("defaultQuality must be between 1 and 100")

    fmt = section.get("defaultFormat")
    if fmt and fmt not in RenderFormat.values():
        issues.append(f"Invalid defaultFormat. Use: {', '.join(RenderFormat.values())}")
    return issues


@dataclass
class DataReport:
    """Result of checking a data file."""

    valid: bool
    summary: str
    warnings: list[str] = field(default_factory=list)


def validate_data(data: Any) -> DataReport:
    """Check a parsed data file: an object, or an array of render items."""
    if isinstance(data, list):
        warnings = [
            f"Item {i}: Missing designId or templateId"
            for i, item in enumerate(data)
            if not isinstance(item, dict) or not (item.get("designId") or item.get("templateId"))
        ]
        return DataReport(True, f"Valid JSON array with {len(data)} items", warnings)
    if isinstance(data, dict):
        return DataReport(True, "Valid JSON object")
    return DataReport(False, "Data should be an object or array")
