"""FFprobe wrapper -- single source of truth for media file probing."""

import json
import subprocess
from dataclasses import dataclass, field
from fractions import Fraction
from pathlib import Path
from typing import List, Optional

from lib.errors import ProbeError


@dataclass(frozen=True)
class AudioStreamInfo:
    index: int
    codec: str
    channels: int
    language: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class MediaProbe:
    """Probe results for one input file.

    ``frame_rate`` and ``frame_count`` are estimates: frame rate is the
    container's nominal rate rounded to 2 decimals and the count is
    duration x rate, so variable-frame-rate sources will not match exactly.
    """

    duration: float
    frame_rate: float
    frame_count: int
    width: int
    height: int
    audio_streams: List[AudioStreamInfo] = field(default_factory=list)


def probe(path: Path, ffprobe: str = "ffprobe") -> dict:
    """Run ffprobe and return parsed JSON with format + streams info.

    Raises subprocess.CalledProcessError if ffprobe fails.
    """
    cmd = [
        ffprobe, "-v", "error",
        "-print_format", "json",
        "-show_format", "-show_streams",
        str(path),
    ]
    result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    return json.loads(result.stdout)


def parse_frame_rate(rate: str) -> Fraction:
    """Evaluate an ffprobe rational such as "30000/1001" exactly.

    Returns 0 for "0/0" and anything unparseable.
    """
    try:
        if "/" in rate:
            num, den = rate.split("/", 1)
            if int(den) == 0:
                return Fraction(0)
            return Fraction(int(num), int(den))
        return Fraction(rate)
    except (TypeError, ValueError):
        return Fraction(0)


def estimate_frames(duration: float, frame_rate: float) -> int:
    """Estimated frame count: duration x frame rate, rounded to the nearest frame."""
    return round(Fraction(str(duration)) * Fraction(str(frame_rate)))


def _audio_info(stream: dict) -> AudioStreamInfo:
    tags = stream.get("tags", {}) or {}
    return AudioStreamInfo(
        index=int(stream["index"]),
        codec=stream.get("codec_name", "unknown"),
        channels=int(stream.get("channels", 0)),
        language=tags.get("language") or tags.get("LANGUAGE"),
        title=tags.get("title") or tags.get("TITLE"),
    )


def parse_probe(data: dict) -> MediaProbe:
    """Build a MediaProbe from ffprobe JSON.

    Raises ProbeError if there is no video stream.
    """
    streams = data.get("streams", [])
    video = next((s for s in streams if s.get("codec_type") == "video"), None)
    if video is None:
        raise ProbeError("No video stream found")

    duration = float(data.get("format", {}).get("duration") or video.get("duration") or 0)
    rate = parse_frame_rate(video.get("r_frame_rate") or video.get("avg_frame_rate") or "0/0")
    frame_rate = float(round(rate, 2))

    return MediaProbe(
        duration=duration,
        frame_rate=frame_rate,
        frame_count=estimate_frames(duration, frame_rate),
        width=int(video.get("width", 0)),
        height=int(video.get("height", 0)),
        audio_streams=[_audio_info(s) for s in streams if s.get("codec_type") == "audio"],
    )


def inspect(path: Path, ffprobe: str = "ffprobe") -> MediaProbe:
    """Probe a file and return its MediaProbe.

    Raises ProbeError when ffprobe can't read the file.
    """
    try:
        data = probe(path, ffprobe)
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"ffprobe exited with status {e.returncode}"
        raise ProbeError(f"Cannot read {path}: {detail}") from e
    except json.JSONDecodeError as e:
        raise ProbeError(f"Cannot parse ffprobe output for {path}: {e}") from e
    return parse_probe(data)
