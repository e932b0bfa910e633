"""Builds and writes the result document for a finished pipeline run."""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from models.artifact import StageArtifact
from video_app.clients.elevenlabs import TranscriptionResult

logger = logging.getLogger(__name__)


class ResultAssembler:
    """Merges stage outputs into one JSON document on disk."""

    def build(self, source_url: str, screenshot: StageArtifact, audio: StageArtifact,
              transcription: TranscriptionResult) -> Dict[str, Any]:
        return {
            'sourceUrl': source_url,
            'processedAt': datetime.now(timezone.utc).isoformat(),
            'screenshot': screenshot.public_path,
            'audioWav': audio.public_path,
            'transcript': transcription.text,
            'words': transcription.words,
            'notes': {
                'scribeError': transcription.error,
                'scribeNote': transcription.note,
            },
        }

    def assemble(self, source_url: str, screenshot: StageArtifact, audio: StageArtifact,
                 transcription: TranscriptionResult, result_path: str) -> Dict[str, Any]:
        """Write the result document to ``result_path`` and return it.

        Write failures propagate to the caller.
        """
        document = self.build(source_url, screenshot, audio, transcription)
        with open(result_path, 'w', encoding='utf-8') as f:
            json.dump(document, f, indent=2, ensure_ascii=False)

        logger.info(f"Result document written: {result_path}")
        return document
