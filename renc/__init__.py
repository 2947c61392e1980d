"""renc -- re-encode videos from the Dolphin context menu via ffmpeg."""

from renc.probe import ProbeStage
from renc.streams import StreamSelectStage
from renc.command import CommandStage
from renc.transcode import TranscodeStage

STAGE_REGISTRY = {
    "probe": ProbeStage,
    "streams": StreamSelectStage,
    "command": CommandStage,
    "transcode": TranscodeStage,
}

STAGE_ORDER = [
    "probe",
    "streams",
    "command",
    "transcode",
]
