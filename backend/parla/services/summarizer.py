"""
Session summarizer

Turns a finished transcript into a short summary plus skill notes. The reply
is parsed into a tagged result so a marker-less reply is observable instead of
silently becoming two empty strings.
"""
import logging
from dataclasses import dataclass
from typing import Union

from ..config import settings
from ..core.errors import InvalidInputError
from .base import TextGenerationService
from .prompts import SKILL_NOTES_MARKER, SUMMARY_MARKER, build_summary_prompt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedSummary:
    summary: str
    skill_notes: str


@dataclass(frozen=True)
class UnparsedSummary:
    """The reply had no SUMMARY: marker; raw text kept for logging/tests"""
    raw: str

    # Degrades to empty fields when persisted
    summary: str = ""
    skill_notes: str = ""


SummaryResult = Union[ParsedSummary, UnparsedSummary]


def parse_summary(text: str) -> SummaryResult:
    """
    Split a "SUMMARY: ... SKILL NOTES: ..." reply.

    Without a SUMMARY: marker the reply is unparsed. With SUMMARY: but no
    SKILL NOTES: the notes are empty.
    """
    if SUMMARY_MARKER not in text:
        return UnparsedSummary(raw=text)
    head, _, tail = text.partition(SKILL_NOTES_MARKER)
    summary = head.replace(SUMMARY_MARKER, "", 1).strip()
    return ParsedSummary(summary=summary, skill_notes=tail.strip())


class SessionSummarizer:
    def __init__(self, generator: TextGenerationService, max_tokens: int = settings.summary_max_tokens):
        self.generator = generator
        self.max_tokens = max_tokens

    async def summarize(self, transcript: str, user_name: str) -> SummaryResult:
        """
        Summarize a transcript for user_name.

        Raises:
            InvalidInputError: empty transcript
            UpstreamError: the generation call failed (propagated, the save must abort)
        """
        if not transcript or not transcript.strip():
            raise InvalidInputError("No transcript provided")

        prompt = build_summary_prompt(transcript, user_name)
        text = await self.generator.generate(
            [{"role": "user", "content": prompt}],
            max_tokens=self.max_tokens,
        )

        result = parse_summary(text)
        if isinstance(result, UnparsedSummary):
            logger.warning("Summary reply had no %s marker (%d chars); saving empty summary", SUMMARY_MARKER, len(text))
        return result
