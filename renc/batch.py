"""Batch orchestrator -- convert files one at a time, report per-file outcomes."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from lib.errors import RencError, TranscodeError, UnsupportedChannelsError, UserCancelled
from lib.profiles import CodecFamily, Profile
from renc import STAGE_ORDER, STAGE_REGISTRY
from renc.job import JobState, TranscodeJob

logger = logging.getLogger("renc")


@dataclass
class FileResult:
    path: Path
    state: JobState
    output_path: Optional[Path] = None
    error: Optional[str] = None


@dataclass
class BatchResult:
    results: List[FileResult] = field(default_factory=list)
    missing: Optional[Path] = None  # set when a missing file halted the batch
    stopped: bool = False  # batch dialog cancelled

    def count(self, state: JobState) -> int:
        return sum(1 for r in self.results if r.state == state)

    @property
    def exit_code(self) -> int:
        if self.missing is not None or self.count(JobState.FAILED):
            return 1
        if self.stopped or self.count(JobState.CANCELLED):
            return 2
        return 0


def run_job(
    path: Path,
    profile: Profile,
    settings,
    dialogs,
    prober: Optional[Callable[[CodecFamily], bool]] = None,
) -> FileResult:
    """Run every stage for one file. Failures are reported here, not raised."""
    job = TranscodeJob(Path(path), profile, ffmpeg=settings.tools.ffmpeg)

    try:
        for stage_name in STAGE_ORDER:
            stage_cls = STAGE_REGISTRY[stage_name]
            if stage_name == "command":
                stage = stage_cls(job, settings, dialogs, prober=prober)
            else:
                stage = stage_cls(job, settings, dialogs)
            stage.run()
    except UserCancelled:
        return FileResult(job.input_path, JobState.CANCELLED)
    except UnsupportedChannelsError as e:
        dialogs.sorry(
            f"{job.input_path.name}: the selected audio stream has {e.channels} channels.\n"
            "Only stereo and 5.1 sources are supported."
        )
        return FileResult(job.input_path, JobState.FAILED, error=str(e))
    except TranscodeError as e:
        dialogs.detailed_error(f"Converting {job.input_path.name} failed ({e}).", e.output)
        return FileResult(job.input_path, JobState.FAILED, error=str(e))
    except RencError as e:
        dialogs.detailed_error(f"Converting {job.input_path.name} failed.", str(e))
        return FileResult(job.input_path, JobState.FAILED, error=str(e))

    job.state = JobState.COMPLETED
    return FileResult(job.input_path, JobState.COMPLETED, output_path=job.output_path)


def run_batch(
    files: Sequence,
    profile: Profile,
    settings,
    dialogs,
    prober: Optional[Callable[[CodecFamily], bool]] = None,
) -> BatchResult:
    """Convert ``files`` in order.

    A missing file stops the whole batch; failed and cancelled files don't.
    """
    paths = [Path(f) for f in files]
    total = len(paths)
    batch = BatchResult()
    logger.info(f"Batch: converting {total} file(s) to {profile.name}")

    batch_dialog = None
    if total > 1:
        batch_dialog = dialogs.progressbar(f"Converting {total} files to {profile.description}", total)

    try:
        for i, path in enumerate(paths, start=1):
            if batch_dialog is not None:
                if batch_dialog.was_cancelled():
                    logger.info(f"Batch cancelled before file {i}/{total}")
                    batch.stopped = True
                    break
                batch_dialog.set_label(f"File {i} / {total}: {path.name}")

            if not path.is_file():
                logger.error(f"File not found: {path}, stopping batch")
                dialogs.error(f"File not found:\n{path}")
                batch.missing = path
                break

            result = run_job(path, profile, settings, dialogs, prober)
            batch.results.append(result)
            logger.info(f"[{i}/{total}] {path.name}: {result.state.value}")

            if batch_dialog is not None:
                batch_dialog.set_value(i)
    finally:
        if batch_dialog is not None:
            batch_dialog.close()

    _report(batch, total, dialogs)
    return batch


def _report(batch: BatchResult, total: int, dialogs):
    done = batch.count(JobState.COMPLETED)
    if total > 1:
        dialogs.passive(
            f"{done} converted, {batch.count(JobState.CANCELLED)} cancelled, "
            f"{batch.count(JobState.FAILED)} failed"
        )
    elif done:
        dialogs.passive(f"Finished: {batch.results[0].output_path.name}")
