"""Profile catalog -- container, codecs and encoder flag-sets per output profile."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from lib.errors import UnknownProfileError

CUSTOM = "custom"


class CodecFamily(str, Enum):
    H264 = "h264"
    HEVC = "hevc"
    VP9 = "vp9"
    AV1 = "av1"


@dataclass(frozen=True)
class Profile:
    """One output profile. ``hardware_args`` is None when there is no VAAPI path."""

    name: str
    muxer: str
    extension: str
    video_name: str
    audio_name: str
    family: CodecFamily
    audio_codec: str  # as ffprobe reports it, for passthrough checks
    audio_encoder: str
    software_args: Tuple[str, ...]
    hardware_args: Optional[Tuple[str, ...]] = None

    @property
    def description(self) -> str:
        return f"{self.extension.upper()} ({self.video_name} / {self.audio_name})"


_X264 = ("-c:v", "libx264", "-crf", "22", "-preset", "medium", "-pix_fmt", "yuv420p")
_X265 = ("-c:v", "libx265", "-crf", "26", "-preset", "medium", "-pix_fmt", "yuv420p")
_H264_VAAPI = ("-c:v", "h264_vaapi", "-qp", "24")
_HEVC_VAAPI = ("-c:v", "hevc_vaapi", "-qp", "26")

PROFILES = {
    "mp4_h264": Profile(
        name="mp4_h264", muxer="mp4", extension="mp4",
        video_name="H.264", audio_name="AAC", family=CodecFamily.H264,
        audio_codec="aac", audio_encoder="aac",
        software_args=_X264 + ("-movflags", "+faststart"),
        hardware_args=_H264_VAAPI + ("-movflags", "+faststart"),
    ),
    "mp4_hevc": Profile(
        name="mp4_hevc", muxer="mp4", extension="mp4",
        video_name="HEVC", audio_name="AAC", family=CodecFamily.HEVC,
        audio_codec="aac", audio_encoder="aac",
        software_args=_X265 + ("-tag:v", "hvc1", "-movflags", "+faststart"),
        hardware_args=_HEVC_VAAPI + ("-tag:v", "hvc1", "-movflags", "+faststart"),
    ),
    "mkv_h264": Profile(
        name="mkv_h264", muxer="matroska", extension="mkv",
        video_name="H.264", audio_name="AAC", family=CodecFamily.H264,
        audio_codec="aac", audio_encoder="aac",
        software_args=_X264,
        hardware_args=_H264_VAAPI,
    ),
    "mkv_hevc": Profile(
        name="mkv_hevc", muxer="matroska", extension="mkv",
        video_name="HEVC", audio_name="AAC", family=CodecFamily.HEVC,
        audio_codec="aac", audio_encoder="aac",
        software_args=_X265,
        hardware_args=_HEVC_VAAPI,
    ),
    "webm_vp9": Profile(
        name="webm_vp9", muxer="webm", extension="webm",
        video_name="VP9", audio_name="Opus", family=CodecFamily.VP9,
        audio_codec="opus", audio_encoder="libopus",
        software_args=("-c:v", "libvpx-vp9", "-crf", "32", "-b:v", "0", "-row-mt", "1"),
        hardware_args=("-c:v", "vp9_vaapi", "-global_quality", "100"),
    ),
    "mkv_av1": Profile(
        name="mkv_av1", muxer="matroska", extension="mkv",
        video_name="AV1", audio_name="Opus", family=CodecFamily.AV1,
        audio_codec="opus", audio_encoder="libopus",
        software_args=("-c:v", "libsvtav1", "-crf", "32", "-preset", "8"),
        hardware_args=("-c:v", "av1_vaapi", "-global_quality", "120"),
    ),
}

PROFILE_ORDER = ["mp4_h264", "mp4_hevc", "mkv_h264", "mkv_hevc", "webm_vp9", "mkv_av1"]


def get_profile(name: str) -> Profile:
    """Look up a fixed profile by name."""
    try:
        return PROFILES[name]
    except KeyError:
        raise UnknownProfileError(name) from None


def is_valid_choice(name: str) -> bool:
    """True for any fixed profile name or ``custom``."""
    return name == CUSTOM or name in PROFILES
