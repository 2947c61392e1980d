"""Transcode stage -- run ffmpeg and relay its progress to a kdialog progress bar.

Inputs:
    - job.output_args, job.output_path, job.probe (frame estimate)
Outputs:
    - the encoded file at job.output_path
Dependencies:
    - ffmpeg, kdialog, qdbus
"""

import signal
import subprocess
from pathlib import Path

from lib.errors import TranscodeError, UserCancelled
from lib.fifo import progress_channel, read_lines
from lib.progress import Failed, ProgressState, exit_event, parse_progress_line
from renc.base import BaseStage
from renc.job import JobState

# Seconds ffmpeg gets to finish up after SIGINT before it is killed
INTERRUPT_GRACE = 30


class TranscodeStage(BaseStage):
    name = "transcode"
    state = JobState.ENCODING

    def execute(self) -> Path:
        job = self.job
        progress = ProgressState(total_frames=job.probe.frame_count)

        with progress_channel() as (fifo_path, log_path):
            cmd = job.command_line(str(fifo_path))
            self.logger.debug(f"Running: {' '.join(cmd)}")

            with self.dialogs.progressbar(
                f"Converting {job.input_path.name}", max(1, progress.total_frames),
            ) as dialog:
                dialog.set_label(self.status_text(progress))
                with open(log_path, "w") as log_file:
                    proc = subprocess.Popen(
                        cmd,
                        stdin=subprocess.DEVNULL,
                        stdout=subprocess.DEVNULL,
                        stderr=log_file,
                    )
                    try:
                        cancelled = self._follow(proc, fifo_path, progress, dialog)
                    except BaseException:
                        proc.kill()
                        proc.wait()
                        raise
                    returncode = self._finish(proc, cancelled)

            output = log_path.read_text(errors="replace") if log_path.exists() else ""

        if cancelled:
            self._discard_output()
            self.dialogs.passive(f"Operation interrupted: {job.input_path.name}")
            raise UserCancelled(str(job.input_path))

        event = exit_event(returncode)
        if isinstance(event, Failed):
            self._discard_output()
            raise TranscodeError(event.returncode, output)

        self.logger.info(f"Wrote {job.output_path}")
        return job.output_path

    def _follow(self, proc, fifo_path: Path, progress: ProgressState, dialog) -> bool:
        """Consume progress lines until ffmpeg is done. Returns True if the user cancelled."""
        lines = read_lines(fifo_path, proc)
        try:
            for line in lines:
                event = parse_progress_line(line)
                if event is not None and progress.apply(event):
                    dialog.set_value(min(progress.frame, progress.total_frames))
                    dialog.set_label(self.status_text(progress))
                if dialog.was_cancelled():
                    self.logger.info("Cancel requested, interrupting ffmpeg")
                    proc.send_signal(signal.SIGINT)
                    return True
        finally:
            lines.close()
        return False

    def _finish(self, proc, cancelled: bool) -> int:
        timeout = INTERRUPT_GRACE if cancelled else None
        try:
            return proc.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            self.logger.warning("ffmpeg ignored SIGINT, killing it")
            proc.kill()
            return proc.wait()

    def _discard_output(self):
        path = self.job.output_path
        if path is not None and path.exists():
            path.unlink()
            self.logger.info(f"Removed incomplete output {path.name}")

    def status_text(self, progress: ProgressState) -> str:
        """Progress dialog label for the current state."""
        job = self.job
        profile = job.profile
        encoder = "VAAPI" if job.hardware else "software"
        audio = {
            "copy": f"{profile.audio_name} (copy)",
            "encode": profile.audio_name,
            "downmix": f"{profile.audio_name} (5.1 to stereo)",
        }.get(job.audio_mode, "no audio")
        return (
            f"{job.input_path.name}\n"
            f"{profile.video_name} ({encoder}) / {audio} / {profile.extension.upper()}\n"
            f"Frame {progress.frame} of ~{progress.total_frames} at {progress.fps:g} fps, "
            f"{progress.bitrate}\n"
            f"Remaining: {progress.eta}"
        )
