"""Desktop dialogs -- kdialog for modal/passive dialogs, qdbus for progress bars.

A kdialog progress bar is a separate process addressed over D-Bus by the
reference it prints on startup (``org.kde.kdialog-1234 /ProgressDialog``).
Every later mutation or query is a qdbus call against that reference.
"""

import logging
import subprocess
from typing import List, Optional, Sequence, Tuple

from lib.errors import DialogError, UserCancelled

logger = logging.getLogger("renc")

# Linux limits a single argv string to 128 KiB; details past this keep only the tail
MAX_DETAILS = 64 * 1024


class ProgressDialog:
    """Handle to a running kdialog progress bar."""

    def __init__(self, ref: Tuple[str, str], qdbus: str = "qdbus"):
        self.ref = ref
        self.qdbus = qdbus
        self.closed = False

    def _call(self, *args: str) -> Optional[str]:
        cmd = [self.qdbus, *self.ref, *args]
        result = subprocess.run(cmd, capture_output=True, text=True)
        if result.returncode != 0:
            logger.debug(f"qdbus {' '.join(args)} failed: {result.stderr.strip()}")
            return None
        return result.stdout.strip()

    def set_value(self, value: int):
        self._call("Set", "", "value", str(int(value)))

    def set_label(self, text: str):
        self._call("setLabelText", text)

    def show_cancel_button(self, show: bool = True):
        self._call("showCancelButton", "true" if show else "false")

    def was_cancelled(self) -> bool:
        """Poll the cancel button. A vanished dialog counts as not cancelled."""
        return self._call("wasCancelled") == "true"

    def close(self):
        if not self.closed:
            self._call("close")
            self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False


class Dialogs:
    """kdialog front-end bound to configured tool paths and window title."""

    def __init__(self, kdialog: str = "kdialog", qdbus: str = "qdbus",
                 title: str = "Re-encode", popup_seconds: int = 5):
        self.kdialog = kdialog
        self.qdbus = qdbus
        self.title = title
        self.popup_seconds = popup_seconds

    @classmethod
    def from_settings(cls, settings) -> "Dialogs":
        return cls(
            kdialog=settings.tools.kdialog,
            qdbus=settings.tools.qdbus,
            title=settings.dialogs.title,
            popup_seconds=settings.dialogs.popup_seconds,
        )

    def _run(self, *args: str) -> subprocess.CompletedProcess:
        cmd = [self.kdialog, "--title", self.title, *args]
        return subprocess.run(cmd, capture_output=True, text=True)

    def _notify(self, *args: str):
        """Show a notice; a kdialog that cannot start only loses the notice, not the error."""
        try:
            self._run(*args)
        except OSError as e:
            logger.warning(f"kdialog failed ({e}), notice not shown: {args[1]}")

    def radiolist(self, text: str, items: Sequence[Tuple[str, str]], default: Optional[str] = None) -> str:
        """Single-choice list. Returns the chosen tag.

        Raises UserCancelled if the dialog is dismissed.
        """
        args: List[str] = ["--radiolist", text]
        for tag, label in items:
            args += [tag, label, "on" if tag == default else "off"]
        result = self._run(*args)
        if result.returncode != 0:
            raise UserCancelled(text)
        choice = result.stdout.strip()
        if not choice:
            raise UserCancelled(text)
        return choice

    def progressbar(self, text: str, maximum: int, cancellable: bool = True) -> ProgressDialog:
        """Open a progress bar and return its handle."""
        try:
            result = self._run("--progressbar", text, str(max(1, int(maximum))))
        except OSError as e:
            raise DialogError(f"kdialog could not open a progress dialog: {e}") from e
        parts = result.stdout.split()
        if result.returncode != 0 or len(parts) < 2:
            raise DialogError(f"kdialog did not return a progress dialog reference: {result.stdout!r}")
        dialog = ProgressDialog((parts[0], parts[1]), self.qdbus)
        dialog.show_cancel_button(cancellable)
        return dialog

    def error(self, text: str):
        self._notify("--error", text)

    def sorry(self, text: str):
        self._notify("--sorry", text)

    def detailed_error(self, text: str, details: str):
        self._notify("--detailederror", text, truncate_details(details))

    def passive(self, text: str):
        self._notify("--passivepopup", text, str(self.popup_seconds))


def truncate_details(details: str, limit: int = MAX_DETAILS) -> str:
    """Keep the last ``limit`` bytes of ``details``; the end of an ffmpeg log holds the error."""
    data = details.encode("utf-8", errors="replace")
    if len(data) <= limit:
        return details
    tail = data[-limit:].decode("utf-8", errors="ignore")
    return f"[... {len(data) - limit} bytes truncated ...]\n{tail}"
