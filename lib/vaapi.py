"""VAAPI capability probing -- vainfo detection and encoder argument selection."""

import functools
import logging
import subprocess
from typing import List

from lib.profiles import CodecFamily, Profile

logger = logging.getLogger("renc")

# vainfo profile names per codec family; any of them with an encode entrypoint counts
VA_PROFILES = {
    CodecFamily.H264: ("VAProfileH264Main", "VAProfileH264High", "VAProfileH264ConstrainedBaseline"),
    CodecFamily.HEVC: ("VAProfileHEVCMain",),
    CodecFamily.VP9: ("VAProfileVP9Profile0",),
    CodecFamily.AV1: ("VAProfileAV1Profile0",),
}

ENCODE_ENTRYPOINTS = ("VAEntrypointEncSlice", "VAEntrypointEncSliceLP")


@functools.lru_cache(maxsize=4)
def vainfo_output(vainfo: str = "vainfo", device: str = "", timeout: int = 10) -> str:
    """Return vainfo's capability listing, or "" when it can't be obtained. Result is cached."""
    cmd = [vainfo]
    if device:
        cmd += ["--display", "drm", "--device", device]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (subprocess.SubprocessError, FileNotFoundError, PermissionError) as e:
        logger.debug(f"vainfo unavailable, assuming no hardware encoding: {e}")
        return ""
    if result.returncode != 0:
        logger.debug(f"vainfo exited with {result.returncode}, assuming no hardware encoding")
        return ""
    # vainfo prints the profile table on stdout; older builds mix in stderr
    return result.stdout + result.stderr


def supports_encode(listing: str, family: CodecFamily) -> bool:
    """Check a vainfo listing for an encode entrypoint on the family's profiles."""
    names = VA_PROFILES[CodecFamily(family)]
    for line in listing.splitlines():
        profile, sep, entrypoint = line.partition(":")
        if not sep:
            continue
        if profile.strip() in names and entrypoint.strip() in ENCODE_ENTRYPOINTS:
            return True
    return False


def has_vaapi(family: CodecFamily, settings) -> bool:
    """Return True if the host can VAAPI-encode ``family``.

    Missing vainfo or a failing query degrades to False.
    """
    if not settings.hardware.enabled:
        return False
    listing = vainfo_output(
        settings.tools.vainfo,
        settings.hardware.vaapi_device,
        settings.hardware.vainfo_timeout,
    )
    return supports_encode(listing, family)


def get_video_encoder_args(profile: Profile, hardware: bool) -> List[str]:
    """Return ffmpeg video output arguments for a profile.

    VAAPI path: ["-vf", "format=nv12,hwupload", <hardware_args>]
    Software path: <software_args>

    The VAAPI path also needs the global ``-vaapi_device`` option, which the
    command builder places before the input.
    """
    if hardware and profile.hardware_args:
        return ["-vf", "format=nv12,hwupload", *profile.hardware_args]
    return list(profile.software_args)
