"""Exception hierarchy for renc."""


class RencError(Exception):
    """Base exception for renc errors."""
    pass


class UnknownProfileError(RencError):
    """Raised when a profile name is not in the catalog."""

    def __init__(self, name: str):
        super().__init__(f"Unknown profile: {name}")
        self.name = name


class DependencyMissingError(RencError):
    """Raised when required external tools are not installed."""

    def __init__(self, missing: list):
        super().__init__(f"Missing required tools: {', '.join(missing)}")
        self.missing = list(missing)


class ProbeError(RencError):
    """Raised when ffprobe cannot read a media file."""
    pass


class UnsupportedChannelsError(RencError):
    """Raised when the selected audio stream has a channel layout we can't map to stereo."""

    def __init__(self, channels: int):
        super().__init__(f"Unsupported audio channel count: {channels}")
        self.channels = channels


class UserCancelled(RencError):
    """Raised when the user dismisses a dialog. Not a failure."""
    pass


class DialogError(RencError):
    """Raised when kdialog/qdbus return something unusable."""
    pass


class TranscodeError(RencError):
    """Raised when ffmpeg exits non-zero."""

    def __init__(self, returncode: int, output: str = ""):
        super().__init__(f"ffmpeg exited with status {returncode}")
        self.returncode = returncode
        self.output = output


class ConfigError(RencError):
    """Raised when config.toml cannot be read, parsed or validated."""

    def __init__(self, path, reason: str):
        super().__init__(f"Invalid configuration in {path}: {reason}")
        self.path = path
