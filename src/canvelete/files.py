"""Small filesystem helpers shared by the stores and the render engines.

Every write goes through a temporary file in the destination directory and an
``os.replace``, so readers (and an interrupted process) never see a partially
written file.
"""

import json
import os
import tempfile
from pathlib import Path
from typing import Any

PathLike = str | os.PathLike[str]


def write_atomic(path: PathLike, data: bytes) -> Path:
    """Write `data` to `path` atomically, creating parent directories.

    Args:
        path: Destination file.
        data: Bytes to write.

    Returns:
        The destination as a `Path`.
    """
    dest = Path(path)
    if dest.parent != Path(""):
        dest.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        dir=dest.parent, prefix=f".{dest.name}.", suffix=".tmp", delete=False
    ) as tmp:
        tmp_path = Path(tmp.name)
        try:
            tmp.write(data)
        except BaseException:
            tmp.close()
            tmp_path.unlink(missing_ok=True)
            raise

    try:
        os.replace(tmp_path, dest)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    return dest


def write_json_atomic(path: PathLike, document: Any) -> Path:
    """Serialize `document` as indented JSON and write it atomically."""
    text = json.dumps(document, indent=2, ensure_ascii=False) + "\n"
    return write_atomic(path, text.encode("utf-8"))


def read_json_file(path: PathLike) -> Any:
    """Load a JSON file; a missing file reads as None.

    Raises:
        json.JSONDecodeError: If the file exists but is not valid JSON.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    return json.loads(text)
