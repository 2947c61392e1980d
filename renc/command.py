"""Command stage -- encoder selection, audio policy and output path.

Inputs:
    - job.profile, job.probe, job.audio_stream
Outputs:
    - job.hardware, job.audio_mode, job.global_args, job.output_args, job.output_path
Config:
    - hardware.enabled, hardware.vaapi_device, audio.bitrate, output.suffix
"""

from typing import Callable, List, Optional, Tuple

from lib.errors import UnsupportedChannelsError
from lib.ffprobe import AudioStreamInfo
from lib.paths import output_path_for
from lib.profiles import CodecFamily, Profile
from lib.vaapi import get_video_encoder_args, has_vaapi
from renc.base import BaseStage
from renc.job import JobState

# Dolby Pro Logic II matrix fold of 5.1 into stereo
DOWNMIX_FILTER = "aresample=matrix_encoding=dplii"


def audio_args(stream: Optional[AudioStreamInfo], profile: Profile, bitrate: str) -> Tuple[str, List[str]]:
    """Return (mode, ffmpeg audio args) for the selected stream.

    Stereo already in the target codec is copied; other stereo is re-encoded;
    5.1 is downmixed to stereo. Any other layout raises UnsupportedChannelsError.
    """
    if stream is None:
        return "none", ["-an"]

    encode = ["-c:a", profile.audio_encoder, "-b:a", bitrate, "-ac", "2"]
    if stream.channels == 2:
        if stream.codec == profile.audio_codec:
            return "copy", ["-c:a", "copy"]
        return "encode", encode
    if stream.channels == 6:
        return "downmix", ["-af", DOWNMIX_FILTER, *encode]
    raise UnsupportedChannelsError(stream.channels)


class CommandStage(BaseStage):
    name = "command"
    state = JobState.ENCODING

    def __init__(self, job, settings, dialogs, prober: Optional[Callable[[CodecFamily], bool]] = None):
        super().__init__(job, settings, dialogs)
        self.prober = prober or (lambda family: has_vaapi(family, settings))

    def execute(self) -> List[str]:
        job = self.job
        profile = job.profile

        # Audio first: an unsupported layout fails the job before anything else
        job.audio_mode, audio = audio_args(job.audio_stream, profile, self.settings.audio.bitrate)

        job.hardware = (
            profile.hardware_args is not None
            and self.settings.hardware.enabled
            and bool(self.prober(profile.family))
        )
        video = get_video_encoder_args(profile, job.hardware)
        job.global_args = ["-vaapi_device", self.settings.hardware.vaapi_device] if job.hardware else []

        maps = ["-map", "0:v:0"]
        if job.audio_stream is not None:
            maps += ["-map", f"0:{job.audio_stream.index}"]

        job.output_args = [
            "-map_metadata", "-1",
            "-map_chapters", "-1",
            *maps,
            *video,
            *audio,
            "-f", profile.muxer,
        ]
        job.output_path = output_path_for(
            job.input_path, profile.name, profile.extension, self.settings.output.suffix,
        )
        self.logger.info(
            f"{profile.name}: {'VAAPI' if job.hardware else 'software'} video, "
            f"audio {job.audio_mode} -> {job.output_path.name}"
        )
        return job.output_args
