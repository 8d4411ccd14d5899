"""
OpenAI Chat Completions Service

Text generation used by every LLM step of the pipeline:
coaching replies, session summaries, skill-level classification,
rubric scoring and progress narratives.
"""
import logging
import httpx
from typing import Optional, Sequence
from ..config import settings
from ..core.errors import UpstreamError
from .base import ChatMessage, TextGenerationService

logger = logging.getLogger(__name__)


class OpenAIChatService(TextGenerationService):
    """OpenAI chat completions over plain HTTP"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.chat_model
        self.api_url = f"{(api_base or settings.openai_api_base).rstrip('/')}/chat/completions"
        self.timeout = timeout or settings.http_timeout_sec

    def is_available(self) -> bool:
        """Check if API key is configured"""
        return bool(self.api_key)

    async def generate(
        self,
        messages: Sequence[ChatMessage],
        *,
        system: Optional[str] = None,
        max_tokens: int = 1024,
    ) -> str:
        """
        Call the chat completions endpoint and return the reply text.

        Parameters:
            messages: Conversation turns ({"role", "content"})
            system: Optional system instruction, sent as the first message
            max_tokens: Output token bound for this call

        Raises:
            UpstreamError: missing key, HTTP/network failure, or empty reply
        """
        if not self.is_available():
            raise UpstreamError("OPENAI_API_KEY not set")

        payload_messages = []
        if system:
            payload_messages.append({"role": "system", "content": system})
        payload_messages.extend({"role": m["role"], "content": m["content"]} for m in messages)

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": payload_messages,
            "max_tokens": max_tokens,
        }

        logger.info("[chat] Calling %s (messages=%d, max_tokens=%d)", self.model, len(payload_messages), max_tokens)
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.post(self.api_url, headers=headers, json=payload)
                resp.raise_for_status()
                result = resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"Chat completion failed: {e}") from e

        try:
            content = result["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamError("No text response from chat completion") from e
        if not content:
            raise UpstreamError("No text response from chat completion")
        return content
