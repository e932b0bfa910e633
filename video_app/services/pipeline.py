"""Video job processing orchestrator.

Drives one job through capture → audio extraction → transcription → result
assembly and records exactly one terminal status for it.

Failure policy:
1. Capture, audio extraction and result writing failures end the job in
   ``error`` with the failure message; later stages are not attempted.
2. Transcription never fails the job; its note or error is folded into the
   result document and the job still ends ``done``.
3. Nothing is retried and partial artifacts are left on disk.
"""
import time
import logging
import threading
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from flask import Flask

from models.job import Job
from video_app.clients.browser import get_page_capture
from video_app.clients.media import get_audio_extractor
from video_app.clients.elevenlabs import get_elevenlabs_client
from video_app.services.job_store import JobStore
from video_app.services.result_assembler import ResultAssembler
from video_app.services.storage import ArtifactStorage

logger = logging.getLogger(__name__)


class _JobLock:
    __slots__ = ('lock', 'holders')

    def __init__(self):
        self.lock = threading.Lock()
        self.holders = 0


# Entries live only while a run holds or waits on them.
_job_locks: Dict[int, _JobLock] = {}
_job_locks_guard = threading.Lock()


@contextmanager
def job_lock(job_id: int) -> Iterator[None]:
    """Hold the exclusive lock for one job id; duplicate runs wait for each other."""
    with _job_locks_guard:
        entry = _job_locks.get(job_id)
        if entry is None:
            entry = _job_locks[job_id] = _JobLock()
        entry.holders += 1

    try:
        with entry.lock:
            yield
    finally:
        with _job_locks_guard:
            entry.holders -= 1
            if entry.holders == 0:
                del _job_locks[job_id]


def describe_failure(exc: BaseException) -> str:
    """Human readable message for a failed stage.

    Order: a library ``message``/``msg`` field, then the ``stderr`` or
    ``stdout`` of a failed subprocess, then the exception's string form.
    """
    for attr in ('message', 'msg'):
        value = getattr(exc, attr, None)
        if isinstance(value, str) and value.strip():
            return value.strip()

    for attr in ('stderr', 'stdout'):
        value = getattr(exc, attr, None)
        if isinstance(value, bytes):
            value = value.decode('utf-8', errors='replace')
        if isinstance(value, str) and value.strip():
            return value.strip()

    return str(exc) or exc.__class__.__name__


def run_base_name(job_id: int) -> str:
    """Artifact name prefix unique to one run of a job."""
    return f"{job_id}-{int(time.time() * 1000)}"


class VideoJobProcessor:
    """Orchestrates pipeline stages for a single job.

    Responsibilities:
    - Move the job queued → processing → done/error
    - Run the stages strictly in order
    - Convert every stage failure into a persisted ``error`` status
    """

    def __init__(self, app: Flask, storage: ArtifactStorage, store: Optional[JobStore] = None,
                 capture=None, audio=None, transcriber=None, assembler=None):
        self.app = app
        self.storage = storage
        self.store = store or JobStore()
        self.capture = capture or get_page_capture()
        self.audio = audio or get_audio_extractor()
        self.transcriber = transcriber or get_elevenlabs_client()
        self.assembler = assembler or ResultAssembler()

    def process_job(self, job_id: int) -> Optional[str]:
        """Run the pipeline for ``job_id`` to a terminal state.

        Returns:
            The terminal status, or None when the job does not exist or
            its state could not be read back (never raises).
        """
        try:
            with self.app.app_context():
                with job_lock(job_id):
                    return self._run(job_id)
        except Exception:
            logger.exception(f"Worker crash while processing job {job_id}")
            return None

    def _run(self, job_id: int) -> Optional[str]:
        job = self.store.load(job_id)
        if job is None:
            logger.warning(f"Job {job_id} not found, nothing to process")
            return None

        try:
            job.mark_processing()
            self.store.save(job)
            logger.info(f"Job {job.id} processing {job.source_url}")

            self._run_stages(job)

            self.store.save(job)
            logger.info(f"Job {job.id} completed successfully")

        except Exception as exc:
            message = describe_failure(exc)
            logger.error(f"Job {job_id} failed: {message}")
            self._record_failure(job_id, job, message)

        return job.status

    def _run_stages(self, job: Job) -> None:
        paths = self.storage.run_paths(job.id, run_base_name(job.id))

        # 1) Screenshot
        self.capture.capture(job.source_url, paths.screenshot)
        screenshot = self.storage.artifact(job.id, 'screenshot', paths.screenshot)

        # 2) Audio download → WAV
        self.audio.extract(job.source_url, paths.raw_audio, paths.wav)
        audio = self.storage.artifact(job.id, 'audio', paths.wav)

        # 3) Transcription, never fatal
        transcription = self.transcriber.transcribe(paths.wav)
        if not transcription.succeeded:
            logger.warning(
                f"Job {job.id} has no transcript: {transcription.error or transcription.note}"
            )

        # 4) Result document
        self.assembler.assemble(job.source_url, screenshot, audio, transcription, paths.result)
        result = self.storage.artifact(job.id, 'result', paths.result)

        job.mark_done(screenshot.public_path, audio.public_path, result.public_path)

    def _record_failure(self, job_id: int, job: Job, message: str) -> None:
        try:
            self.store.rollback()
            job.mark_error(message)
            self.store.save(job)
        except Exception:
            logger.critical(f"Could not persist error state for job {job_id}", exc_info=True)
