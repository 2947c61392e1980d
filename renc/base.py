"""BaseStage ABC -- foundation for the per-file conversion stages."""

import logging
import time
from abc import ABC, abstractmethod

from lib.errors import UserCancelled
from renc.job import JobState, TranscodeJob

logger = logging.getLogger("renc")


class BaseStage(ABC):
    """Abstract base class for job stages.

    Each stage receives the job being converted, reads what earlier stages
    filled in and adds its own part. ``state`` is the job state while the
    stage runs.
    """

    name: str = "base"
    state: JobState = JobState.IDLE

    def __init__(self, job: TranscodeJob, settings, dialogs):
        self.job = job
        self.settings = settings
        self.dialogs = dialogs
        self.logger = logging.getLogger(f"renc.{self.name}")

    @abstractmethod
    def execute(self):
        """Run the stage's core logic."""
        ...

    def run(self):
        """Execute with job state tracking, timing and logging."""
        self.job.state = self.state
        self.logger.info(f"[{self.name}] {self.job.input_path.name}: starting...")
        start = time.time()

        try:
            result = self.execute()
        except UserCancelled:
            elapsed = time.time() - start
            self.job.state = JobState.CANCELLED
            self.logger.info(f"[{self.name}] Cancelled by user after {elapsed:.1f}s")
            raise
        except Exception as e:
            elapsed = time.time() - start
            self.job.state = JobState.FAILED
            self.logger.error(f"[{self.name}] Failed after {elapsed:.1f}s: {e}")
            raise

        elapsed = time.time() - start
        self.logger.info(f"[{self.name}] Completed in {elapsed:.1f}s")
        return result
