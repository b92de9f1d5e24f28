"""
ffprobe/ffmpeg wrappers used by the video upload pipeline.
The pipeline only depends on the MediaInspector / MediaNormalizer protocols, so tests can pass fakes.
"""
import json
import logging
import math
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from tubely.config import Settings
from tubely.errors import InvalidDimensions, NoStreams, ProbeFailed, RemuxFailed

logger = logging.getLogger(__name__)

ASPECT_TOLERANCE = 0.1
LANDSCAPE = "landscape/"
PORTRAIT = "portrait/"
SQUARE = "square/"
OTHER = "other/"

# Checked in order; first match wins
ORIENTATIONS = (
    (16 / 9, LANDSCAPE),
    (9 / 16, PORTRAIT),
    (1.0, SQUARE),
)

PROCESSING_SUFFIX = ".processing"


@dataclass(frozen=True)
class Dimensions:
    width: int
    height: int

    @property
    def orientation(self) -> str:
        return classify_orientation(self.width, self.height)


def classify_orientation(width: int, height: int) -> str:
    """Bucket a frame size into landscape/, portrait/, square/ or other/."""
    if width <= 0 or height <= 0:
        raise InvalidDimensions(detail=f"{width}x{height}")
    ratio = width / height
    for target, bucket in ORIENTATIONS:
        if math.fabs(ratio - target) < ASPECT_TOLERANCE:
            return bucket
    return OTHER


class MediaInspector(Protocol):
    def inspect(self, path: Path) -> Dimensions: ...


class MediaNormalizer(Protocol):
    def normalize(self, path: Path) -> Path: ...


def parse_probe_output(stdout: str | bytes) -> Dimensions:
    """Read the first stream's width/height from `ffprobe -print_format json -show_streams` output."""
    try:
        data = json.loads(stdout)
        streams = data["streams"]
    except (ValueError, KeyError, TypeError) as e:
        raise ProbeFailed(detail=f"failed to parse ffprobe output: {e}") from e
    if not isinstance(streams, list):
        raise ProbeFailed(detail="ffprobe output has no stream list")
    if not streams:
        raise NoStreams(detail="no streams found in video")
    stream = streams[0]
    try:
        width = int(stream.get("width") or 0)
        height = int(stream.get("height") or 0)
    except (AttributeError, TypeError, ValueError) as e:
        raise ProbeFailed(detail=f"unexpected stream entry: {stream!r}") from e
    if width == 0 or height == 0:
        raise InvalidDimensions(detail=f"{width}x{height}")
    return Dimensions(width=width, height=height)


class FFprobeInspector:
    """Runs ffprobe on a local file and returns the first video stream's geometry."""

    def __init__(self, settings: Settings):
        self.ffprobe = settings.ffprobe_path
        self.timeout = settings.media_tool_timeout_seconds

    def command(self, path: Path) -> list[str]:
        return [
            self.ffprobe,
            "-v", "error",
            "-select_streams", "v",
            "-print_format", "json",
            "-show_streams",
            str(path),
        ]

    def inspect(self, path: Path) -> Dimensions:
        try:
            result = subprocess.run(
                self.command(path),
                check=True,
                capture_output=True,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode(errors="replace") if e.stderr else ""
            raise ProbeFailed(detail=f"ffprobe exited with {e.returncode}: {stderr}") from e
        except subprocess.TimeoutExpired as e:
            raise ProbeFailed(detail=f"ffprobe timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise ProbeFailed(detail=f"ffprobe not found: {self.ffprobe}") from e
        dims = parse_probe_output(result.stdout)
        logger.debug("ffprobe %s: %dx%d", path, dims.width, dims.height)
        return dims


class FFmpegNormalizer:
    """Remuxes an MP4 with -movflags faststart (stream copy, no re-encode) to <input>.processing."""

    def __init__(self, settings: Settings):
        self.ffmpeg = settings.ffmpeg_path
        self.timeout = settings.media_tool_timeout_seconds

    def command(self, path: Path, output_path: Path) -> list[str]:
        return [
            self.ffmpeg,
            "-hide_banner",
            "-v", "error",
            "-y",
            "-i", str(path),
            "-c", "copy",
            "-movflags", "faststart",
            "-f", "mp4",
            str(output_path),
        ]

    def normalize(self, path: Path) -> Path:
        output_path = path.with_name(path.name + PROCESSING_SUFFIX)
        try:
            subprocess.run(
                self.command(path, output_path),
                check=True,
                capture_output=True,
                stdin=subprocess.DEVNULL,
                timeout=self.timeout,
            )
        except subprocess.CalledProcessError as e:
            output_path.unlink(missing_ok=True)
            stderr = e.stderr.decode(errors="replace") if e.stderr else ""
            raise RemuxFailed(stderr or f"ffmpeg exited with {e.returncode}") from e
        except subprocess.TimeoutExpired as e:
            output_path.unlink(missing_ok=True)
            raise RemuxFailed(f"ffmpeg timed out after {self.timeout}s") from e
        except FileNotFoundError as e:
            raise RemuxFailed(f"ffmpeg not found: {self.ffmpeg}") from e
        logger.debug("ffmpeg faststart %s -> %s", path, output_path)
        return output_path
