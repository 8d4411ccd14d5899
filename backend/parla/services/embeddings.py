"""
Session embeddings for semantic recall.

Builds the text that represents a session, turns it into a vector with the
OpenAI embeddings API, and compares vectors with cosine similarity.
"""
import logging
from typing import List, Optional, Sequence

import httpx
import numpy as np

from ..config import settings
from ..core.errors import UpstreamError
from .base import EmbeddingService

logger = logging.getLogger(__name__)

# Characters of transcript folded into the embedded text, and of the stored digest
TRANSCRIPT_EXCERPT_CHARS = 500
DIGEST_CHARS = 500


def create_embedding_content(summary: str, skill_notes: str, transcript: Optional[str] = None) -> str:
    """
    Combine a session's summary, skill notes and the opening of its transcript
    into one searchable text. Empty inputs drop their section entirely.
    """
    parts: List[str] = []
    if summary:
        parts.append(f"Summary: {summary}")
    if skill_notes:
        parts.append(f"Skills and patterns: {skill_notes}")
    if transcript:
        parts.append(f"Discussion excerpt: {transcript[:TRANSCRIPT_EXCERPT_CHARS]}")
    return "\n\n".join(parts)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine similarity (1 - cosine distance) of two vectors.

    Returns 0.0 when either vector has zero norm.

    Raises:
        ValueError: If the vectors have different dimensions
    """
    v1 = np.asarray(a, dtype=np.float64)
    v2 = np.asarray(b, dtype=np.float64)
    if v1.shape != v2.shape:
        raise ValueError(f"Embedding dimensions don't match: {v1.shape} vs {v2.shape}")

    norm1 = np.linalg.norm(v1)
    norm2 = np.linalg.norm(v2)
    if norm1 == 0 or norm2 == 0:
        return 0.0

    similarity = np.dot(v1, v2) / (norm1 * norm2)
    return float(np.clip(similarity, -1.0, 1.0))


class OpenAIEmbeddingService(EmbeddingService):
    """OpenAI /embeddings over plain HTTP (text-embedding-3-small, 1536-d)"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        api_base: Optional[str] = None,
        dimensions: Optional[int] = None,
    ):
        self.api_key = api_key or settings.openai_api_key
        self.model = model or settings.embedding_model
        self.dimensions = dimensions or settings.embedding_dimensions
        self.api_url = f"{(api_base or settings.openai_api_base).rstrip('/')}/embeddings"

    async def embed(self, text: str) -> List[float]:
        """
        Generate an embedding for text.

        Raises:
            UpstreamError: If the API call fails or returns a vector of the wrong size
        """
        if not self.api_key:
            raise UpstreamError("OPENAI_API_KEY not set")

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {"model": self.model, "input": text}

        try:
            async with httpx.AsyncClient(timeout=settings.http_timeout_sec) as client:
                resp = await client.post(self.api_url, headers=headers, json=payload)
                resp.raise_for_status()
                result = resp.json()
        except httpx.HTTPError as e:
            raise UpstreamError(f"Embedding request failed: {e}") from e

        try:
            vector = [float(x) for x in result["data"][0]["embedding"]]
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise UpstreamError("Unexpected embedding response") from e

        if len(vector) != self.dimensions:
            raise UpstreamError(f"Unexpected embedding dimension: {len(vector)}, expected {self.dimensions}")
        logger.debug("Generated embedding with %d dimensions", len(vector))
        return vector
