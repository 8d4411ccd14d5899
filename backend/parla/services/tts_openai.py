"""
OpenAI Speech (TTS) Service

Streams MP3 audio for coach replies. The voice comes from the user's coach
personality and the speed from their settings.
"""
import asyncio
import logging
import httpx
from typing import AsyncGenerator, Optional
from .base import TTSService
from ..config import settings, TTS_SPEED_OPTIONS
from ..core.errors import InvalidInputError, UpstreamError

logger = logging.getLogger(__name__)

VOICES = ("alloy", "echo", "fable", "nova", "onyx", "shimmer")


class OpenAISpeechService(TTSService):
    """OpenAI /audio/speech over plain HTTP"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.tts_model
        self.api_url = f"{(api_base or settings.openai_api_base).rstrip('/')}/audio/speech"
        self.timeout = timeout or settings.http_timeout_sec

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def _stream_speech(self, text: str, voice: str, speed: float) -> AsyncGenerator[bytes, None]:
        """
        Call the speech endpoint and yield MP3 chunks as they arrive

        Parameters:
        - text: Text to synthesize
        - voice: One of VOICES
        - speed: Playback speed multiplier (one of TTS_SPEED_OPTIONS)
        """
        if not self.is_available():
            raise UpstreamError("OPENAI_API_KEY is missing")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "voice": voice,
            "input": text,
            "speed": speed,
            "response_format": "mp3",
        }

        logger.info("[tts] POST %s voice=%s speed=%s text_len=%d", self.api_url, voice, speed, len(text))
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            async with client.stream("POST", self.api_url, headers=headers, json=payload) as resp:
                resp.raise_for_status()
                async for chunk in resp.aiter_bytes():
                    if chunk:
                        yield chunk
                    await asyncio.sleep(0)

    async def synthesize(self, text: str, voice: str, speed: float) -> bytes:
        """Synthesize text and return the complete MP3 payload"""
        if not text or not text.strip():
            raise InvalidInputError("No text provided")
        if voice not in VOICES:
            raise InvalidInputError(f"Unknown voice: {voice}")
        if speed not in TTS_SPEED_OPTIONS:
            raise InvalidInputError("Invalid speed setting")

        chunks = []
        try:
            async for chunk in self._stream_speech(text, voice, speed):
                chunks.append(chunk)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Text-to-speech failed: {e}") from e

        audio = b"".join(chunks)
        logger.info("[tts] Generation completed, size: %d bytes", len(audio))
        return audio
