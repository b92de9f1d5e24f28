"""
Stage an upload stream to a scratch file so ffprobe/ffmpeg can read it more than once.
The scratch file is removed when the context exits, whatever the outcome.
"""
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator

from tubely.errors import BadRequest, StagingError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024  # 1 MB


def copy_bounded(src: BinaryIO, dst: BinaryIO, max_bytes: int) -> int:
    """Copy src into dst in chunks. Raises BadRequest once more than max_bytes were read."""
    total = 0
    while chunk := src.read(CHUNK_SIZE):
        total += len(chunk)
        if total > max_bytes:
            raise BadRequest(f"Upload exceeds the {max_bytes} byte limit")
        dst.write(chunk)
    return total


@contextmanager
def staged_upload(
    src: BinaryIO,
    *,
    max_bytes: int,
    suffix: str = "",
    staging_dir: str = "",
) -> Iterator[tuple[BinaryIO, Path]]:
    """Yield (file, path) for a fully-written scratch copy of src, positioned at offset 0."""
    try:
        fd, name = tempfile.mkstemp(prefix="tubely-upload-", suffix=suffix, dir=staging_dir or None)
    except OSError as e:
        raise StagingError("Couldn't create temp file", detail=str(e)) from e
    path = Path(name)
    try:
        with os.fdopen(fd, "w+b") as f:
            try:
                size = copy_bounded(src, f, max_bytes)
                f.flush()
                f.seek(0)
            except OSError as e:
                raise StagingError(detail=str(e)) from e
            logger.debug("Staged %d bytes at %s", size, path)
            yield f, path
    finally:
        path.unlink(missing_ok=True)
