"""Per-file job record and its state machine."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional

from lib.ffprobe import AudioStreamInfo, MediaProbe
from lib.profiles import Profile


class JobState(str, Enum):
    IDLE = "idle"
    PROBING = "probing"
    STREAM_SELECTION = "stream_selection"
    ENCODING = "encoding"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass
class TranscodeJob:
    """Everything known about converting one input file.

    Filled in stage by stage: probe, then audio_stream, then the encoder
    arguments and output_path. Discarded once the file is done.
    """

    input_path: Path
    profile: Profile
    ffmpeg: str = "ffmpeg"
    state: JobState = JobState.IDLE
    probe: Optional[MediaProbe] = None
    audio_stream: Optional[AudioStreamInfo] = None
    hardware: bool = False
    audio_mode: str = "none"  # copy | encode | downmix | none
    output_path: Optional[Path] = None
    global_args: List[str] = field(default_factory=list)
    output_args: List[str] = field(default_factory=list)

    def command_line(self, progress_target: str) -> List[str]:
        """Full ffmpeg invocation writing -progress output to ``progress_target``."""
        if self.output_path is None:
            raise ValueError("output_path not set; build the command first")
        return [
            self.ffmpeg, "-hide_banner", "-nostdin", "-n",
            *self.global_args,
            "-i", str(self.input_path),
            *self.output_args,
            "-progress", progress_target, "-nostats",
            str(self.output_path),
        ]
