"""
OpenAI Whisper API Adapter

Transcribes browser recordings (webm/opus, mp4, wav) with the Whisper API.
"""
import logging
import mimetypes
import httpx
from typing import Optional
from .base import ASRService, TranscriptionResult
from ..config import settings
from ..core.errors import UpstreamError

logger = logging.getLogger(__name__)


class OpenAIWhisperService(ASRService):
    """OpenAI Whisper API Service"""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None, api_base: Optional[str] = None):
        self.api_key = api_key or settings.openai_api_key
        self.api_url = f"{(api_base or settings.openai_api_base).rstrip('/')}/audio/transcriptions"
        self.model = model or settings.whisper_model

    @property
    def name(self) -> str:
        return "OpenAI Whisper API"

    def is_available(self) -> bool:
        """Check if API key is configured"""
        return bool(self.api_key)

    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.webm",
        language: Optional[str] = None,
    ) -> TranscriptionResult:
        """
        Call OpenAI Whisper API for transcription

        Uses verbose_json so the detected language and duration come back too.
        """
        if not self.is_available():
            raise UpstreamError(f"{self.name}: API key not configured")

        headers = {"Authorization": f"Bearer {self.api_key}"}
        data = {
            "model": self.model,
            "response_format": "verbose_json",
            "temperature": 0.0,  # most deterministic
        }
        if language:
            data["language"] = language

        mime = mimetypes.guess_type(filename)[0] or "application/octet-stream"
        files = {"file": (filename, audio, mime)}

        logger.info("[asr] Transcribing %d bytes (%s, language=%s)", len(audio), mime, language)
        try:
            async with httpx.AsyncClient(timeout=120) as client:
                resp = await client.post(self.api_url, headers=headers, data=data, files=files)
                resp.raise_for_status()
                result = resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"Transcription failed: {e}") from e

        return TranscriptionResult(
            full_text=(result.get("text") or "").strip(),
            language=result.get("language"),
            duration_sec=result.get("duration"),
        )
