"""Run the full pipeline for one posted conversation."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from tavern_logger.models import EntityCandidate, Message, PipelineResult, ResolvedCharacters

from .formatter import format_transcript
from .resolver import resolve_characters
from .router import LogRouter
from .tags import extract_candidates

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProcessedConversation:
    candidates: list[EntityCandidate]
    characters: ResolvedCharacters
    transcript: str


def process_conversation(messages: Sequence[Message]) -> ProcessedConversation:
    """Stages 1–4: extract, resolve, anonymize and format. Pure."""
    candidates = extract_candidates(messages)
    characters = resolve_characters(candidates, messages)
    transcript = format_transcript(messages, characters.user_entity)
    logger.debug(
        "Resolved ai=%r user=%r from %d candidate(s)",
        characters.ai_entity, characters.user_entity, len(candidates),
    )
    return ProcessedConversation(candidates=candidates, characters=characters, transcript=transcript)


async def run_pipeline(
    messages: Sequence[Message],
    router: LogRouter,
    raw_messages: list[dict[str, Any]] | None = None,
) -> PipelineResult:
    """Stages 1–5. Storage failures are absorbed by the router.

    raw_messages is what gets written to the raw JSON copy; when omitted it
    is rebuilt from the models with the fields the client actually set.
    """
    processed = process_conversation(messages)
    if raw_messages is None:
        raw_messages = [m.model_dump(exclude_unset=True) for m in messages]
    log = await router.route(processed.characters.ai_entity, processed.transcript, raw_messages)
    return PipelineResult(
        candidates=processed.candidates,
        characters=processed.characters,
        transcript=processed.transcript,
        log=log,
    )
