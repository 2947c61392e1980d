"""Centralized path resolution for renc."""

import os
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def get_project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


def output_path_for(source: Path, profile_name: str, extension: str, suffix: str = "_renc_") -> Path:
    """Return a non-existing output path next to ``source``.

    The candidate is ``<stem><suffix><profile>.<ext>``. While it exists the
    ``<suffix><profile>`` segment is appended again, so every attempt is
    strictly longer than the last and the loop ends after at most one
    iteration per existing file in the directory.

    Example: with ``foo_renc_mp4_h264.mp4`` present, ``foo.mkv`` maps to
    ``foo_renc_mp4_h264_renc_mp4_h264.mp4``.
    """
    source = Path(source)
    segment = f"{suffix}{profile_name}"
    stem = source.stem + segment
    candidate = source.with_name(f"{stem}.{extension}")
    while candidate.exists():
        stem += segment
        candidate = source.with_name(f"{stem}.{extension}")
    return candidate


def get_servicemenu_dir() -> Path:
    """Return the Dolphin service menu directory.

    Checks XDG_DATA_HOME first, falls back to ~/.local/share.
    """
    data_home = os.getenv("XDG_DATA_HOME", "")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "kio" / "servicemenus"
