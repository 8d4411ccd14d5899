"""
Unit tests for services.embeddings module.
Tests embedding text composition, cosine similarity and the OpenAI client.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from parla.core.errors import UpstreamError
from parla.services.embeddings import (
    OpenAIEmbeddingService,
    cosine_similarity,
    create_embedding_content,
)


class TestCreateEmbeddingContent:
    def test_all_sections(self):
        content = create_embedding_content("Talked about Rome", "Uses passato prossimo", "User: Ciao")
        assert content == (
            "Summary: Talked about Rome\n\n"
            "Skills and patterns: Uses passato prossimo\n\n"
            "Discussion excerpt: User: Ciao"
        )

    def test_empty_sections_are_omitted(self):
        assert create_embedding_content("Only summary", "", None) == "Summary: Only summary"
        assert create_embedding_content("", "", "") == ""

    def test_transcript_excerpt_is_truncated(self):
        content = create_embedding_content("", "", "a" * 800)
        assert content == "Discussion excerpt: " + "a" * 500


class TestCosineSimilarity:
    def test_identical_vectors(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal_vectors(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_opposite_vectors(self):
        assert cosine_similarity([1.0, 0.0], [-1.0, 0.0]) == pytest.approx(-1.0)

    def test_zero_vector(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_dimension_mismatch(self):
        with pytest.raises(ValueError):
            cosine_similarity([1.0, 0.0], [1.0, 0.0, 0.0])


class TestOpenAIEmbeddingService:
    @pytest.mark.asyncio
    async def test_embed_returns_vector(self):
        mock_response = MagicMock()
        mock_response.json.return_value = {"data": [{"embedding": [0.1, 0.2, 0.3]}]}
        mock_response.raise_for_status = MagicMock()

        with patch('httpx.AsyncClient') as mock_client_class:
            mock_post = AsyncMock(return_value=mock_response)
            mock_client = AsyncMock()
            mock_client.__aenter__.return_value.post = mock_post
            mock_client_class.return_value = mock_client

            service = OpenAIEmbeddingService(api_key="k", model="text-embedding-3-small", dimensions=3)
            vector = await service.embed("Summary: ciao")

        assert vector == [0.1, 0.2, 0.3]
        payload = mock_post.call_args[1]["json"]
        assert payload == {"model": "text-embedding-3-small", "input": "Summary: ciao"}

    @pytest.mark.asyncio
    async def test_embed_rejects_wrong_dimension(self):
        mock_response = MagicMock()
        mock_response.json.return_value = {"data": [{"embedding": [0.1, 0.2]}]}
        mock_response.raise_for_status = MagicMock()

        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client = AsyncMock()
            mock_client.__aenter__.return_value.post = AsyncMock(return_value=mock_response)
            mock_client_class.return_value = mock_client

            service = OpenAIEmbeddingService(api_key="k", dimensions=1536)
            with pytest.raises(UpstreamError):
                await service.embed("text")
