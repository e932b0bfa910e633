"""ElevenLabs speech-to-text client."""
import os
import json
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Optional

import requests

from utils.config import ElevenLabsSettings, get_app_config
from utils.exceptions import TranscriptionError

logger = logging.getLogger(__name__)

UPLOAD_URL_FIELDS = ('upload_url', 'file_url', 'url')


@dataclass
class TranscriptionResult:
    """Outcome of one transcription attempt.

    Exactly one shape applies:
    - success: ``text`` set, ``words`` optional
    - soft failure: ``text`` is None and ``note`` explains why
    - hard failure: ``text`` and ``words`` are None and ``error`` is set
    """

    text: Optional[str] = None
    words: Optional[List[Dict[str, Any]]] = None
    note: Optional[str] = None
    error: Optional[str] = None
    raw: Optional[Dict[str, Any]] = field(default=None, repr=False)

    @property
    def succeeded(self) -> bool:
        return self.text is not None


def _segments(data: Dict[str, Any]) -> Optional[list]:
    segments = data.get('segments')
    return segments if isinstance(segments, list) else None


def _string(value):
    return value if isinstance(value, str) and value else None


def _text_field(data):
    return _string(data.get('text'))


def _transcript_field(data):
    return _string(data.get('transcript'))


def _text_from_segments(data):
    segments = _segments(data)
    if segments is None:
        return None
    texts = [
        _string(segment.get('text'))
        for segment in segments if isinstance(segment, dict)
    ]
    return ' '.join(text for text in texts if text) or None


def _word_list(value):
    return value if isinstance(value, list) and value else None


def _words_field(data):
    return _word_list(data.get('words'))


def _words_from_segments(data):
    segments = _segments(data)
    if segments is None:
        return None
    words = [
        word
        for segment in segments if isinstance(segment, dict)
        for word in (_word_list(segment.get('words')) or [])
    ]
    return words or None


# Tried in order; the first non-empty value wins.
TEXT_EXTRACTORS: tuple = (_text_field, _transcript_field, _text_from_segments)
WORDS_EXTRACTORS: tuple = (_words_field, _words_from_segments)


def _first_match(extractors: tuple, data: Dict[str, Any]) -> Optional[Any]:
    for extractor in extractors:
        value = extractor(data)
        if value is not None:
            return value
    return None


def parse_transcription_response(data: Dict[str, Any]) -> TranscriptionResult:
    """Pull text and word timings out of a speech-to-text response.

    The response schema varies across plans, so several field layouts are
    accepted. A response without usable text becomes a soft failure that
    keeps the raw payload for diagnostics.
    """
    if not isinstance(data, dict):
        data = {}

    text = _first_match(TEXT_EXTRACTORS, data)
    words = _first_match(WORDS_EXTRACTORS, data)

    if not text:
        return TranscriptionResult(text=None, words=words, raw=data, note='No text in response')
    return TranscriptionResult(text=text, words=words, raw=data)


def _describe_request_error(exc: Exception) -> str:
    """Prefer the service's error body over the exception message."""
    response = getattr(exc, 'response', None)
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = response.text
        if body:
            return body if isinstance(body, str) else json.dumps(body)
    return str(exc) or exc.__class__.__name__


class ElevenLabsClient:
    """Client for the ElevenLabs upload and speech-to-text API."""

    def __init__(self, settings: Optional[ElevenLabsSettings] = None, session=None):
        self.settings = settings or get_app_config().elevenlabs
        self._session = session or requests

    def transcribe(self, wav_path: str) -> TranscriptionResult:
        """Transcribe a local WAV file.

        Never raises: a missing API key or an empty response gives a result
        with ``note`` set, any request failure one with ``error`` set.
        """
        if not self.settings.api_key:
            logger.warning("ELEVENLABS_API_KEY not set, skipping transcription")
            return TranscriptionResult(note='ELEVENLABS_API_KEY not set')

        logger.info(f"Starting ElevenLabs transcription for {wav_path}")

        try:
            audio_url = self.upload_file(wav_path)

            response = self._session.post(
                self.settings.stt_url,
                json={
                    'model_id': self.settings.model_id,
                    'audio_url': audio_url,
                },
                headers={
                    'Content-Type': 'application/json',
                    'Accept': 'application/json',
                    'xi-api-key': self.settings.api_key,
                },
                timeout=self.settings.timeout_seconds,
            )
            response.raise_for_status()
            data = response.json() or {}

        except Exception as exc:
            message = _describe_request_error(exc)
            logger.error(f"ElevenLabs transcription failed: {message}")
            return TranscriptionResult(error=f"ElevenLabs error: {message}")

        try:
            result = parse_transcription_response(data)
        except Exception:
            logger.warning("Unreadable ElevenLabs response", exc_info=True)
            return TranscriptionResult(note='Unreadable transcription response', raw=data)

        if result.succeeded:
            logger.info(f"ElevenLabs transcription completed: {len(result.text)} characters")
        else:
            logger.warning(f"ElevenLabs returned no text: {result.note}")
        return result

    def upload_file(self, local_path: str) -> str:
        """Upload a local file and return the reference URL the service assigns.

        Raises:
            TranscriptionError: The response has no recognizable URL field
            requests.RequestException: The upload request failed
        """
        with open(local_path, 'rb') as audio_file:
            response = self._session.post(
                f"{self.settings.base_url}/v1/upload",
                files={'file': (os.path.basename(local_path), audio_file, 'audio/wav')},
                headers={'xi-api-key': self.settings.api_key},
                timeout=self.settings.timeout_seconds,
            )
        response.raise_for_status()

        data = response.json() or {}
        for name in UPLOAD_URL_FIELDS:
            if data.get(name):
                return data[name]
        raise TranscriptionError(f"Upload response missing url: {json.dumps(data)}")


@lru_cache(maxsize=1)
def get_elevenlabs_client() -> ElevenLabsClient:
    """Get cached ElevenLabs client instance."""
    return ElevenLabsClient()
