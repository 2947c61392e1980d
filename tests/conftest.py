"""Shared test fixtures for renc tests."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from lib.config import Settings
from lib.ffprobe import AudioStreamInfo, MediaProbe
from lib.profiles import get_profile
from renc.job import TranscodeJob


@pytest.fixture
def settings():
    """Default settings, independent of config/config.toml."""
    return Settings()


@pytest.fixture
def progress_bar():
    """A fake kdialog progress bar that is never cancelled."""
    bar = MagicMock()
    bar.__enter__.return_value = bar
    bar.__exit__.return_value = False
    bar.was_cancelled.return_value = False
    return bar


@pytest.fixture
def dialogs(progress_bar):
    """A fake Dialogs front-end whose progress bars are ``progress_bar``."""
    d = MagicMock()
    d.progressbar.return_value = progress_bar
    return d


@pytest.fixture
def mock_ffprobe_result():
    """Return a mock ffprobe JSON result with two audio streams."""
    return {
        "format": {
            "duration": "120.120",
            "size": "50000000",
        },
        "streams": [
            {
                "index": 0,
                "codec_type": "video",
                "codec_name": "h264",
                "width": 1920,
                "height": 1080,
                "r_frame_rate": "30000/1001",
                "avg_frame_rate": "30000/1001",
            },
            {
                "index": 1,
                "codec_type": "audio",
                "codec_name": "ac3",
                "channels": 6,
                "tags": {"language": "eng", "title": "Surround 5.1"},
            },
            {
                "index": 2,
                "codec_type": "audio",
                "codec_name": "aac",
                "channels": 2,
                "tags": {"language": "deu"},
            },
        ],
    }


@pytest.fixture
def stereo_aac():
    return AudioStreamInfo(index=1, codec="aac", channels=2, language="eng")


@pytest.fixture
def sample_probe(stereo_aac):
    return MediaProbe(
        duration=20.0,
        frame_rate=50.0,
        frame_count=1000,
        width=1280,
        height=720,
        audio_streams=[stereo_aac],
    )


@pytest.fixture
def make_job(tmp_path, sample_probe):
    """Build a TranscodeJob for a (not necessarily existing) file in tmp_path."""
    def _make(profile_name="mp4_h264", name="foo.mkv", probe=sample_probe, audio_stream="first"):
        job = TranscodeJob(Path(tmp_path / name), get_profile(profile_name))
        job.probe = probe
        if audio_stream == "first":
            job.audio_stream = probe.audio_streams[0] if probe.audio_streams else None
        else:
            job.audio_stream = audio_stream
        return job
    return _make
