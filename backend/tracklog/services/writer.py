"""
Track log output.

Creates the output directory on demand and writes rendered track logs.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from tracklog.errors import TrackLogWriteError
from tracklog.models.track import TrackLog
from tracklog.services.g1000 import default_filename, render_tracklog


logger = logging.getLogger(__name__)


DEFAULT_OUTPUT_DIR = Path(os.getenv("TRACKLOG_OUTPUT_DIR", "./outputs"))


def resolve_output_path(
    tracklog: TrackLog,
    output: Optional[Path] = None,
    output_dir: Optional[Path] = None,
) -> Path:
    """
    Pick the file to write.

    An explicit `output` wins; otherwise the default filename is placed in
    `output_dir` (or the configured output directory).
    """
    if output is not None:
        return Path(output)
    if tracklog.start is None:
        raise ValueError("Track log has no points to derive a filename from")
    folder = Path(output_dir) if output_dir is not None else DEFAULT_OUTPUT_DIR
    return folder / default_filename(tracklog.airframe, tracklog.start)


def write_text(contents: str, path: Path) -> Path:
    """Write text as UTF-8, creating parent directories."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise TrackLogWriteError(f"Could not create output directory ({e.strerror})", path.parent) from e

    try:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(contents)
    except OSError as e:
        raise TrackLogWriteError(f"Could not write track log ({e.strerror})", path) from e

    return path


def write_tracklog(
    tracklog: TrackLog,
    output: Optional[Path] = None,
    output_dir: Optional[Path] = None,
) -> Path:
    """
    Render and save a track log.

    Returns:
        Path of the written file

    Raises:
        TrackLogWriteError: the directory or file could not be written
    """
    path = resolve_output_path(tracklog, output, output_dir)
    write_text(render_tracklog(tracklog), path)
    logger.info(f"Wrote {tracklog.row_count} rows to {path}")
    return path
