"""Audio download and transcoding client for video URLs."""

import os
import logging
from functools import lru_cache

import yt_dlp
from pydub import AudioSegment

from utils.exceptions import ProcessingError

logger = logging.getLogger(__name__)

# Normalized waveform: mono, 16 kHz, signed 16-bit little-endian PCM
WAV_CHANNELS = 1
WAV_FRAME_RATE = 16000
WAV_SAMPLE_WIDTH = 2
WAV_CODEC = 'pcm_s16le'


class AudioExtractor:
    """Client for fetching the best audio track of a video as a WAV file."""

    def extract(self, video_url: str, raw_path: str, wav_path: str) -> str:
        """Download the best audio stream and transcode it to WAV.

        Args:
            video_url: URL of the video
            raw_path: Temporary location for the raw download
            wav_path: Destination of the normalized waveform

        Returns:
            Path to the WAV file

        The raw download is removed before returning, whether or not the
        download or the transcode succeeded.
        """
        try:
            self._download_audio(video_url, raw_path)
            self._transcode_to_wav(raw_path, wav_path)
        finally:
            if os.path.exists(raw_path):
                try:
                    os.remove(raw_path)
                    logger.debug(f"Cleaned up raw audio file: {raw_path}")
                except OSError as e:
                    logger.warning(f"Failed to cleanup raw audio file: {e}")

        logger.info(f"Audio extracted: {wav_path}")
        return wav_path

    def _download_audio(self, video_url: str, raw_path: str) -> None:
        """Download the best available audio stream using yt-dlp."""
        ydl_opts = {
            'format': 'bestaudio/best',
            'outtmpl': raw_path,
            'quiet': True,
            'no_warnings': True,
            'noplaylist': True,
            'overwrites': True,
        }

        try:
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                logger.debug(f"Downloading audio from {video_url}")
                ydl.download([video_url])
        except yt_dlp.DownloadError as e:
            raise ProcessingError(f"Failed to download audio: {e.msg or e}") from e

        if not os.path.exists(raw_path):
            raise ProcessingError(f"Audio file not found after download: {raw_path}")

    def _transcode_to_wav(self, raw_path: str, wav_path: str) -> None:
        """Transcode the raw download to the normalized waveform format."""
        try:
            audio = AudioSegment.from_file(raw_path)
            audio = (
                audio.set_channels(WAV_CHANNELS)
                .set_frame_rate(WAV_FRAME_RATE)
                .set_sample_width(WAV_SAMPLE_WIDTH)
            )
            exported = audio.export(wav_path, format='wav', codec=WAV_CODEC)
            exported.close()
        except Exception as e:
            raise ProcessingError(f"Failed to transcode audio to WAV: {e}") from e


@lru_cache(maxsize=1)
def get_audio_extractor() -> AudioExtractor:
    """Get cached audio extractor instance."""
    return AudioExtractor()
