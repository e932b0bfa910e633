"""Stage artifact references produced during a pipeline run."""
from dataclasses import dataclass


ARTIFACT_KINDS = ('screenshot', 'audio', 'result')


@dataclass(frozen=True)
class StageArtifact:
    """A file written by one stage and referenced from the job once recorded."""

    job_id: int
    kind: str  # screenshot, audio, result
    path: str
    public_path: str

    def __post_init__(self):
        if self.kind not in ARTIFACT_KINDS:
            raise ValueError(f"Unknown artifact kind: {self.kind}")

    def __repr__(self):
        return f'<StageArtifact job={self.job_id} kind={self.kind} path={self.public_path}>'
