"""Dolphin service menu -- the desktop file that puts renc in the context menu."""

import logging
import os
import stat
from pathlib import Path
from typing import Optional

from lib.paths import get_servicemenu_dir
from lib.profiles import CUSTOM, PROFILE_ORDER, PROFILES

logger = logging.getLogger("renc")

MENU_FILENAME = "renc.desktop"


def render_servicemenu(command: str = "renc") -> str:
    """Render the service menu desktop entry, one action per profile plus custom."""
    actions = PROFILE_ORDER + [CUSTOM]
    lines = [
        "[Desktop Entry]",
        "Type=Service",
        "X-KDE-ServiceTypes=KonqPopupMenu/Plugin",
        "MimeType=video/*;",
        "Actions=" + ";".join(actions) + ";",
        "X-KDE-Submenu=Re-encode",
        "Icon=video-x-generic",
        "",
    ]
    for name in actions:
        label = PROFILES[name].description if name in PROFILES else "Choose profile..."
        lines += [
            f"[Desktop Action {name}]",
            f"Name={label}",
            "Icon=video-x-generic",
            f"Exec={command} convert {name} %F",
            "",
        ]
    return "\n".join(lines)


def install_servicemenu(directory: Optional[Path] = None, command: str = "renc") -> Path:
    """Write the service menu and mark it executable (Plasma 6 ignores it otherwise)."""
    target_dir = Path(directory) if directory else get_servicemenu_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / MENU_FILENAME
    path.write_text(render_servicemenu(command))
    mode = os.stat(path).st_mode
    os.chmod(path, mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    logger.info(f"Installed service menu at {path}")
    return path


def uninstall_servicemenu(directory: Optional[Path] = None) -> bool:
    """Remove the service menu. Returns False if it wasn't installed."""
    path = (Path(directory) if directory else get_servicemenu_dir()) / MENU_FILENAME
    if not path.exists():
        return False
    path.unlink()
    logger.info(f"Removed service menu {path}")
    return True
