"""Local artifact storage for pipeline runs."""
import os
import logging
from dataclasses import dataclass
from typing import Optional

from models.artifact import StageArtifact
from utils.config import get_app_config

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = '/files'
SCREENSHOTS_DIR = 'screenshots'
AUDIO_DIR = 'audio'
RESULTS_DIR = 'results'


@dataclass(frozen=True)
class RunPaths:
    """Disk locations for every file one pipeline run may write."""

    job_id: int
    base: str
    screenshot: str
    raw_audio: str
    wav: str
    result: str


class ArtifactStorage:
    """Service for laying out artifact files under the data directory.

    Path structure:
    - {data_dir}/screenshots/{base}.png
    - {data_dir}/audio/{base}.src   (raw download, removed after transcoding)
    - {data_dir}/audio/{base}.wav
    - {data_dir}/results/{base}.json

    ``base`` is ``{job_id}-{epoch_ms}`` so every run writes fresh files.
    Public paths mirror the layout under ``/files``.
    """

    def __init__(self, data_dir: Optional[str] = None):
        self.data_dir = os.path.abspath(data_dir or get_app_config().data_dir)
        self.ensure_directories()

    def ensure_directories(self) -> None:
        """Create the data directory and its artifact subdirectories if absent."""
        for subdir in ('', SCREENSHOTS_DIR, AUDIO_DIR, RESULTS_DIR):
            os.makedirs(os.path.join(self.data_dir, subdir), exist_ok=True)
        logger.debug(f"Artifact directories ready under {self.data_dir}")

    def run_paths(self, job_id: int, base: str) -> RunPaths:
        """Disk paths for a run identified by ``base``."""
        return RunPaths(
            job_id=job_id,
            base=base,
            screenshot=os.path.join(self.data_dir, SCREENSHOTS_DIR, f'{base}.png'),
            raw_audio=os.path.join(self.data_dir, AUDIO_DIR, f'{base}.src'),
            wav=os.path.join(self.data_dir, AUDIO_DIR, f'{base}.wav'),
            result=os.path.join(self.data_dir, RESULTS_DIR, f'{base}.json'),
        )

    def public_path(self, disk_path: str) -> str:
        """Map a file under the data directory to its ``/files/...`` reference."""
        relative = os.path.relpath(os.path.abspath(disk_path), self.data_dir)
        if relative.startswith('..'):
            raise ValueError(f"Path is outside the data directory: {disk_path}")
        return f"{PUBLIC_PREFIX}/{relative.replace(os.sep, '/')}"

    def artifact(self, job_id: int, kind: str, disk_path: str) -> StageArtifact:
        """Build the artifact reference for a file a stage has written."""
        return StageArtifact(
            job_id=job_id,
            kind=kind,
            path=disk_path,
            public_path=self.public_path(disk_path),
        )
