"""FFmpeg -progress parsing -- typed events, progress state and ETA."""

from dataclasses import dataclass
from typing import Optional, Union


@dataclass(frozen=True)
class FrameUpdate:
    frame: int


@dataclass(frozen=True)
class FpsUpdate:
    fps: float


@dataclass(frozen=True)
class BitrateUpdate:
    bitrate: str


@dataclass(frozen=True)
class Completed:
    pass


@dataclass(frozen=True)
class Failed:
    returncode: int


ProgressEvent = Union[FrameUpdate, FpsUpdate, BitrateUpdate, Completed, Failed]


def parse_progress_line(line: str) -> Optional[ProgressEvent]:
    """Parse one line of ffmpeg's -progress output.

    Only frame, fps and bitrate produce events. ``progress=``, other keys,
    ``N/A`` values and garbage return None.
    """
    key, sep, value = line.strip().partition("=")
    if not sep:
        return None
    key = key.strip()
    value = value.strip()
    if not value or value == "N/A":
        return None

    if key == "frame":
        try:
            return FrameUpdate(int(value))
        except ValueError:
            return None
    if key == "fps":
        try:
            return FpsUpdate(float(value))
        except ValueError:
            return None
    if key == "bitrate":
        return BitrateUpdate(value)
    return None


def exit_event(returncode: int) -> ProgressEvent:
    """Terminal event for an ffmpeg exit status."""
    return Completed() if returncode == 0 else Failed(returncode)


def remaining_seconds(total_frames: int, frame: int, fps: float) -> Optional[int]:
    """Estimated seconds left, or None while fps or the frame total is unknown.

    (total - processed) / fps, rounded, never negative.
    """
    if fps <= 0 or total_frames <= 0:
        return None
    return max(0, round((total_frames - frame) / fps))


def fmt_hms(seconds: Optional[int]) -> str:
    """Format seconds as HH:MM:SS; "--:--:--" when unknown."""
    if seconds is None:
        return "--:--:--"
    seconds = max(0, int(seconds))
    h = seconds // 3600
    m = (seconds % 3600) // 60
    s = seconds % 60
    return f"{h:02d}:{m:02d}:{s:02d}"


@dataclass
class ProgressState:
    """Live progress of one encode. Owned by the running job only."""

    total_frames: int
    frame: int = 0
    fps: float = 0.0
    bitrate: str = "N/A"

    @property
    def remaining(self) -> Optional[int]:
        return remaining_seconds(self.total_frames, self.frame, self.fps)

    @property
    def eta(self) -> str:
        return fmt_hms(self.remaining)

    def apply(self, event: ProgressEvent) -> bool:
        """Fold an event into the state. Returns True if anything changed."""
        if isinstance(event, FrameUpdate):
            self.frame = event.frame
        elif isinstance(event, FpsUpdate):
            self.fps = event.fps
        elif isinstance(event, BitrateUpdate):
            self.bitrate = event.bitrate
        else:
            return False
        return True
