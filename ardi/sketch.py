"""Sketch path resolution and baud rate detection for ardi."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_SKETCH_DIR = "sketches"

_SERIAL_BEGIN_RE = re.compile(r"\bSerial\.begin\s*\(\s*([0-9]+)\s*\)")


def resolve_sketch_path(name: str, sketch_dir: str | Path = DEFAULT_SKETCH_DIR) -> Path:
    """Resolve a sketch argument to a directory path.

    A bare name (no path separator) is looked up under ``sketch_dir``;
    anything else is taken as a path. A trailing separator is dropped.
    """
    separators = {"/", os.sep}
    if not any(sep in name for sep in separators):
        return Path(sketch_dir) / name
    return Path(name.rstrip("/" + os.sep) or name)


def sketch_main_file(sketch: Path | str) -> Path:
    """Return the sketch's main source file, ``<dir>/<dir name>.ino``."""
    sketch = Path(sketch)
    return sketch / f"{sketch.name}.ino"


def detect_baud_rate(sketch: Path | str) -> int:
    """Return the rate passed to the first Serial.begin() in the sketch.

    Returns 0 when the file cannot be read or no call is found, so the
    caller keeps its default.
    """
    path = sketch_main_file(sketch)
    try:
        with open(path, errors="ignore") as f:
            for line in f:
                match = _SERIAL_BEGIN_RE.search(line)
                if match:
                    return int(match.group(1))
    except OSError as e:
        logger.info("Failed to read sketch", extra={"fields": {"sketch": str(sketch), "error": e}})
        return 0
    return 0


def resolve_baud(default: int, detected: int) -> int:
    """Prefer a detected rate when it is set and differs from the default."""
    if detected and detected != default:
        return detected
    return default
