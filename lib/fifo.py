"""Named-pipe progress channel between renc and ffmpeg."""

import contextlib
import os
import select
import shutil
import tempfile
import time
from pathlib import Path
from typing import Iterator, Tuple


@contextlib.contextmanager
def progress_channel(prefix: str = "renc-") -> Iterator[Tuple[Path, Path]]:
    """Create a fresh temp dir holding a FIFO and a log file path.

    Yields (fifo_path, log_path). The directory and everything in it are
    removed on exit, whatever the outcome.
    """
    tmp_dir = Path(tempfile.mkdtemp(prefix=prefix))
    try:
        fifo_path = tmp_dir / "progress"
        os.mkfifo(fifo_path, 0o600)
        yield fifo_path, tmp_dir / "ffmpeg.log"
    finally:
        shutil.rmtree(tmp_dir, ignore_errors=True)


def read_lines(fifo_path: Path, proc, poll_interval: float = 0.5) -> Iterator[str]:
    """Yield lines written to ``fifo_path`` until the writer is done.

    The read end is opened non-blocking so a writer that never shows up
    (ffmpeg failing before it opens its progress output) can't hang us: each
    idle poll checks whether ``proc`` has exited.
    """
    fd = os.open(fifo_path, os.O_RDONLY | os.O_NONBLOCK)
    buf = b""
    connected = False
    try:
        while True:
            ready, _, _ = select.select([fd], [], [], poll_interval)
            if not ready:
                if proc.poll() is not None:
                    break
                continue
            try:
                chunk = os.read(fd, 65536)
            except BlockingIOError:
                continue
            if not chunk:
                # EOF: either the writer closed, or none has opened yet
                if connected or proc.poll() is not None:
                    break
                time.sleep(poll_interval)
                continue
            connected = True
            buf += chunk
            while b"\n" in buf:
                line, buf = buf.split(b"\n", 1)
                yield line.decode("utf-8", "replace")
        if buf:
            yield buf.decode("utf-8", "replace")
    finally:
        os.close(fd)
