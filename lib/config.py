"""Configuration loading -- config/config.toml validated into Settings."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from lib.errors import ConfigError
from lib.paths import get_project_root


class ToolsConfig(BaseModel):
    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"
    vainfo: str = "vainfo"
    kdialog: str = "kdialog"
    qdbus: str = "qdbus"


class HardwareConfig(BaseModel):
    enabled: bool = True
    vaapi_device: str = "/dev/dri/renderD128"
    vainfo_timeout: int = Field(default=10, gt=0)


class AudioConfig(BaseModel):
    bitrate: str = "192k"


class OutputConfig(BaseModel):
    suffix: str = Field(default="_renc_", min_length=1)


class DialogsConfig(BaseModel):
    title: str = "Re-encode"
    popup_seconds: int = Field(default=5, ge=0)


class Settings(BaseModel):
    tools: ToolsConfig = Field(default_factory=ToolsConfig)
    hardware: HardwareConfig = Field(default_factory=HardwareConfig)
    audio: AudioConfig = Field(default_factory=AudioConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    dialogs: DialogsConfig = Field(default_factory=DialogsConfig)


def get_config_path() -> Path:
    """Return the config file path. RENC_CONFIG overrides the bundled config.toml."""
    env_path = os.getenv("RENC_CONFIG", "")
    if env_path:
        return Path(env_path)
    return get_project_root() / "config" / "config.toml"


def load_config(path: Optional[Path] = None) -> Settings:
    """Load config.toml and apply environment overrides.

    A missing file is not an error; every setting has a default. An
    unreadable, malformed or out-of-range file raises ConfigError.
    """
    config_path = Path(path) if path else get_config_path()
    data = {}
    if config_path.exists():
        try:
            import tomli
        except ImportError:
            import tomllib as tomli
        try:
            with open(config_path, "rb") as f:
                data = tomli.load(f)
        except (OSError, tomli.TOMLDecodeError) as e:
            raise ConfigError(config_path, str(e)) from e

    # Environment variable overrides always win
    env_map = {
        "RENC_VAAPI_DEVICE": ("hardware", "vaapi_device"),
        "RENC_AUDIO_BITRATE": ("audio", "bitrate"),
    }
    for env_var, (section, key) in env_map.items():
        env_val = os.getenv(env_var, "")
        if env_val:
            data.setdefault(section, {})[key] = env_val

    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(config_path, str(e)) from e
