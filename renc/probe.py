"""Probe stage -- read duration, frame rate, resolution and audio streams.

Inputs:
    - job.input_path
Outputs:
    - job.probe (MediaProbe)
Dependencies:
    - ffprobe
"""

from lib.ffprobe import inspect
from renc.base import BaseStage
from renc.job import JobState


class ProbeStage(BaseStage):
    name = "probe"
    state = JobState.PROBING

    def execute(self):
        probe = inspect(self.job.input_path, self.settings.tools.ffprobe)
        self.logger.debug(
            f"{self.job.input_path.name}: {probe.width}x{probe.height}, "
            f"{probe.duration:.2f}s @ {probe.frame_rate} fps (~{probe.frame_count} frames), "
            f"{len(probe.audio_streams)} audio stream(s)"
        )
        self.job.probe = probe
        return probe
