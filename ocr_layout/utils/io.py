"""
I/O utilities for the layout pipeline.

Handles:
- Reading OCR markdown input
- Atomic output writing (rendered in memory, then swapped into place)
- JSON serialization
- Directory management
"""

import json
import logging
import os
import tempfile
from enum import Enum
from pathlib import Path
from typing import Any, Union
from dataclasses import asdict, is_dataclass

logger = logging.getLogger(__name__)


class DocumentIOError(RuntimeError):
    """Input could not be read or output could not be written."""


# ============================================================================
# Input
# ============================================================================

def read_markdown(path: Union[str, Path]) -> str:
    """
    Read an OCR markdown file as UTF-8.

    Raises:
        DocumentIOError: If the file is missing, unreadable or not UTF-8
    """
    path = Path(path)
    if not path.is_file():
        raise DocumentIOError(f"Input file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise DocumentIOError(f"Input is not valid UTF-8: {path} ({e})") from e
    except OSError as e:
        raise DocumentIOError(f"Cannot read input {path}: {e}") from e

    logger.info(f"Read {len(text)} characters from {path}")
    return text


# ============================================================================
# Output
# ============================================================================

def ensure_dir(path: Union[str, Path]) -> Path:
    """Ensure a directory exists, creating it if necessary."""
    path = Path(path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_bytes_atomic(data: bytes, output_path: Union[str, Path]) -> Path:
    """
    Write ``data`` to ``output_path`` in one step.

    The bytes go to a temporary file in the destination directory which
    then replaces the target, so readers never see a partial file.

    Raises:
        DocumentIOError: If the output cannot be created
    """
    output_path = Path(output_path)
    tmp_name = None
    try:
        ensure_dir(output_path.parent)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{output_path.name}.", suffix=".tmp", dir=output_path.parent
        )
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_name, output_path)
    except OSError as e:
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise DocumentIOError(f"Cannot write output {output_path}: {e}") from e

    logger.debug(f"Wrote {len(data)} bytes to {output_path}")
    return output_path


def write_text_atomic(text: str, output_path: Union[str, Path]) -> Path:
    return write_bytes_atomic(text.encode("utf-8"), output_path)


# ============================================================================
# JSON
# ============================================================================

class EnhancedJSONEncoder(json.JSONEncoder):
    """JSON encoder for dataclasses, enums and paths."""

    def default(self, obj):
        if is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Path):
            return str(obj)
        return super().default(obj)


def to_json(data: Any, indent: int = 2) -> str:
    return json.dumps(data, cls=EnhancedJSONEncoder, indent=indent, ensure_ascii=False)


def save_json(data: Any, output_path: Union[str, Path], indent: int = 2) -> Path:
    """Save data to a JSON file atomically."""
    path = write_text_atomic(to_json(data, indent=indent), output_path)
    logger.debug(f"Saved JSON to: {path}")
    return path


def load_json(json_path: Union[str, Path]) -> Any:
    """Load data from a JSON file."""
    json_path = Path(json_path)
    if not json_path.exists():
        raise DocumentIOError(f"JSON file not found: {json_path}")

    with open(json_path, 'r', encoding='utf-8') as f:
        return json.load(f)
