"""Stream selection stage -- pick the audio stream to keep.

One stream is taken as-is, several are offered in a radiolist, none
disables audio for the file.
"""

from typing import List, Optional

from lib.ffprobe import AudioStreamInfo
from renc.base import BaseStage
from renc.job import JobState


def describe_stream(stream: AudioStreamInfo) -> str:
    """Radiolist label: index, language, channels, codec and optional title."""
    label = f"#{stream.index} [{stream.language or 'und'}] {stream.channels}ch {stream.codec}"
    if stream.title:
        label += f" - {stream.title}"
    return label


class StreamSelectStage(BaseStage):
    name = "streams"
    state = JobState.STREAM_SELECTION

    def execute(self) -> Optional[AudioStreamInfo]:
        streams: List[AudioStreamInfo] = self.job.probe.audio_streams

        if not streams:
            self.logger.info(f"{self.job.input_path.name}: no audio stream, audio disabled")
            selected = None
        elif len(streams) == 1:
            selected = streams[0]
        else:
            items = [(str(s.index), describe_stream(s)) for s in streams]
            # UserCancelled propagates and ends this file's job
            choice = self.dialogs.radiolist(
                f"Select the audio stream for {self.job.input_path.name}:",
                items,
                default=items[0][0],
            )
            selected = next(s for s in streams if str(s.index) == choice)

        if selected:
            self.logger.info(
                f"Audio stream #{selected.index}: {selected.codec}, {selected.channels} channels"
            )
        self.job.audio_stream = selected
        return selected
