"""Application configuration utilities."""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional
import os

from dotenv import load_dotenv

from utils.exceptions import ConfigurationError


load_dotenv()


@dataclass(frozen=True)
class ElevenLabsSettings:
    api_key: Optional[str]
    base_url: str = "https://api.elevenlabs.io"
    stt_url: str = "https://api.elevenlabs.io/v1/speech-to-text"
    model_id: str = "scribe"
    timeout_seconds: int = 300


@dataclass(frozen=True)
class CaptureSettings:
    navigation_timeout_ms: int = 90_000
    settle_delay_ms: int = 3_000
    viewport_width: int = 1280
    viewport_height: int = 720


@dataclass(frozen=True)
class AppConfig:
    data_dir: str
    database_url: str
    elevenlabs: ElevenLabsSettings
    capture: CaptureSettings = field(default_factory=CaptureSettings)
    max_concurrent_jobs: int = 2
    allowed_origins: tuple[str, ...] = field(default_factory=lambda: ("*",))


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    data_dir = os.path.abspath(os.getenv("DATA_DIR", "data"))
    database_url = os.getenv("DATABASE_URL") or f"sqlite:///{os.path.join(data_dir, 'jobs.db')}"

    base_url = os.getenv("ELEVENLABS_BASE_URL", "https://api.elevenlabs.io").rstrip("/")

    max_jobs = _int_env("MAX_CONCURRENT_JOBS", 2)
    if max_jobs < 1:
        raise ConfigurationError("MAX_CONCURRENT_JOBS must be at least 1")

    return AppConfig(
        data_dir=data_dir,
        database_url=database_url,
        elevenlabs=ElevenLabsSettings(
            api_key=os.getenv("ELEVENLABS_API_KEY") or None,
            base_url=base_url,
            stt_url=os.getenv("ELEVENLABS_STT_URL", f"{base_url}/v1/speech-to-text"),
            model_id=os.getenv("ELEVENLABS_MODEL_ID", "scribe"),
            timeout_seconds=_int_env("ELEVENLABS_TIMEOUT_SECONDS", 300),
        ),
        capture=CaptureSettings(
            navigation_timeout_ms=_int_env("NAVIGATION_TIMEOUT_MS", 90_000),
            settle_delay_ms=_int_env("SETTLE_DELAY_MS", 3_000),
            viewport_width=_int_env("VIEWPORT_WIDTH", 1280),
            viewport_height=_int_env("VIEWPORT_HEIGHT", 720),
        ),
        max_concurrent_jobs=max_jobs,
        allowed_origins=tuple(
            origin.strip()
            for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
        ),
    )
