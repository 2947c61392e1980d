"""External tool checks."""

import logging
import shutil
from typing import List

from lib.errors import DependencyMissingError

logger = logging.getLogger("renc")

# Plasma 6 installs qdbus as qdbus6, some distros as qdbus-qt6/qdbus-qt5
QDBUS_ALTERNATIVES = ("qdbus", "qdbus6", "qdbus-qt6", "qdbus-qt5")


def resolve_qdbus(settings) -> str:
    """Switch settings.tools.qdbus to an installed variant if the configured one is missing."""
    configured = settings.tools.qdbus
    if shutil.which(configured) is not None:
        return configured
    for candidate in QDBUS_ALTERNATIVES:
        if candidate != configured and shutil.which(candidate) is not None:
            logger.debug(f"{configured} not found, using {candidate}")
            settings.tools.qdbus = candidate
            break
    return settings.tools.qdbus


def required_tools(settings) -> List[str]:
    """Executables renc cannot work without. vainfo is optional."""
    tools = settings.tools
    return [tools.ffmpeg, tools.ffprobe, tools.kdialog, tools.qdbus]


def check_dependencies(settings):
    """Raise DependencyMissingError listing every required tool not on PATH."""
    resolve_qdbus(settings)
    missing = [tool for tool in required_tools(settings) if shutil.which(tool) is None]
    if missing:
        raise DependencyMissingError(missing)
