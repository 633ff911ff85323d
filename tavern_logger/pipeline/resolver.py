"""Decide which character the human plays and which the assistant plays.

Both decisions are an ordered list of strategy objects; the first one
that returns a value wins. Order is document order everywhere, so ties
always go to the earliest candidate.

User strategies (default):
  LastUserLabelStrategy  most recent user message starting "Label:"

Assistant strategies (default):
  NoCandidateStrategy    no candidates → "unknown"
  SingleCandidateStrategy exactly one candidate → it
  DisambiguateStrategy   first candidate unrelated to the user's name
  FirstCandidateStrategy first candidate
"""

import re
from collections.abc import Sequence
from typing import Protocol

from tavern_logger.models import (
    UNKNOWN_ENTITY,
    EntityCandidate,
    Message,
    ResolvedCharacters,
)

from .tags import is_structural

_NON_KEY_RE = re.compile(r"[\W_]+")


def normalized_key(name: str) -> str:
    """Case-folded name with punctuation and whitespace removed.

    Only used to compare names, never for display or file names.
    """
    return _NON_KEY_RE.sub("", name.casefold())


def related(a: str, b: str) -> bool:
    """True if either normalized name equals or contains the other."""
    ka, kb = normalized_key(a), normalized_key(b)
    if not ka or not kb:
        return False
    return ka == kb or ka in kb or kb in ka


def filter_candidates(candidates: Sequence[EntityCandidate]) -> list[str]:
    """Drop empty and structural names, dedupe by raw name keeping the first."""
    seen: set[str] = set()
    names: list[str] = []
    for candidate in candidates:
        name = candidate.name.strip()
        if not name or is_structural(name) or name in seen:
            continue
        seen.add(name)
        names.append(name)
    return names


# ── User strategies ──────────────────────────────────────


class UserStrategy(Protocol):
    name: str

    def attempt(self, messages: Sequence[Message]) -> str | None: ...


class LastUserLabelStrategy:
    """Most recent user message whose first line reads "Label: ..."."""

    name = "last_user_label"

    def attempt(self, messages: Sequence[Message]) -> str | None:
        for message in reversed(messages):
            if message.role != "user":
                continue
            first_line = message.text.split("\n", 1)[0]
            label, sep, _ = first_line.partition(":")
            if sep and label.strip():
                return label.strip()
        return None


# ── Assistant strategies ─────────────────────────────────


class AssistantStrategy(Protocol):
    name: str

    def attempt(self, candidates: Sequence[str], user_entity: str | None) -> str | None: ...


class NoCandidateStrategy:
    name = "no_candidate"

    def attempt(self, candidates: Sequence[str], user_entity: str | None) -> str | None:
        return UNKNOWN_ENTITY if not candidates else None


class SingleCandidateStrategy:
    name = "single_candidate"

    def attempt(self, candidates: Sequence[str], user_entity: str | None) -> str | None:
        return candidates[0] if len(candidates) == 1 else None


class DisambiguateStrategy:
    """First candidate that is not the user's own character."""

    name = "disambiguate"

    def attempt(self, candidates: Sequence[str], user_entity: str | None) -> str | None:
        if not user_entity or not normalized_key(user_entity):
            return None
        for candidate in candidates:
            if not related(candidate, user_entity):
                return candidate
        return None


class FirstCandidateStrategy:
    name = "first_candidate"

    def attempt(self, candidates: Sequence[str], user_entity: str | None) -> str | None:
        return candidates[0] if candidates else None


DEFAULT_USER_STRATEGIES: tuple[UserStrategy, ...] = (LastUserLabelStrategy(),)

DEFAULT_ASSISTANT_STRATEGIES: tuple[AssistantStrategy, ...] = (
    NoCandidateStrategy(),
    SingleCandidateStrategy(),
    DisambiguateStrategy(),
    FirstCandidateStrategy(),
)


def detect_user_entity(
    messages: Sequence[Message],
    strategies: Sequence[UserStrategy] = DEFAULT_USER_STRATEGIES,
) -> str | None:
    for strategy in strategies:
        found = strategy.attempt(messages)
        if found:
            return found
    return None


def resolve_characters(
    candidates: Sequence[EntityCandidate],
    messages: Sequence[Message],
    *,
    user_strategies: Sequence[UserStrategy] = DEFAULT_USER_STRATEGIES,
    assistant_strategies: Sequence[AssistantStrategy] = DEFAULT_ASSISTANT_STRATEGIES,
) -> ResolvedCharacters:
    """Resolve the user and assistant characters for a conversation.

    Never raises: with nothing to go on the assistant is "unknown" and the
    user is None.
    """
    names = filter_candidates(candidates)
    user_entity = detect_user_entity(messages, user_strategies)

    ai_entity = UNKNOWN_ENTITY
    for strategy in assistant_strategies:
        found = strategy.attempt(names, user_entity)
        if found:
            ai_entity = found
            break

    return ResolvedCharacters(ai_entity=ai_entity, user_entity=user_entity)
