"""
Provider Service Abstract Interfaces

Every AI collaborator the pipeline talks to is consumed through one of these
interfaces. Concrete OpenAI adapters live next to this module; tests swap in
fakes by constructing components with their own implementations.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import List, Optional, Sequence, TypedDict


class ChatMessage(TypedDict):
    """One conversation turn as sent to the text generation service"""
    role: str  # "user" | "assistant"
    content: str


@dataclass
class TranscriptionResult:
    """Speech-to-text result"""
    full_text: str
    language: Optional[str] = None  # Detected language
    duration_sec: Optional[float] = None  # Total audio duration


class TextGenerationService(ABC):
    """Chat-completion style text generation"""

    @abstractmethod
    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        system: Optional[str] = None,
        max_tokens: int = 1024,
    ) -> str:
        """
        Generate a reply for the given messages.

        Raises:
        - UpstreamError: provider/network failure or empty reply
        """


class EmbeddingService(ABC):
    """Text embedding generation"""

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Return a fixed-length embedding vector for text"""


class ASRService(ABC):
    """Speech-to-text"""

    @abstractmethod
    async def transcribe(
        self,
        audio: bytes,
        filename: str = "audio.webm",
        language: Optional[str] = None,
    ) -> TranscriptionResult:
        """
        Transcribe an audio blob

        Parameters:
        - audio: Raw audio bytes as uploaded by the browser
        - filename: Original filename (the provider sniffs the format from it)
        - language: Optional language hint (e.g., "it")
        """

    @abstractmethod
    def is_available(self) -> bool:
        """Check if service is available"""


class TTSService(ABC):
    """Text-to-speech"""

    @abstractmethod
    async def synthesize(self, text: str, voice: str, speed: float) -> bytes:
        """Return MP3 audio bytes for text spoken by voice at speed"""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if service is available"""
