"""Core domain models.

All pipeline stages operate on these types. Pydantic is used at the
request boundary (Message); the intermediate pipeline values are frozen
dataclasses since they are never serialised.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

# Roles the pipeline understands; any other role (tool, developer, ...) is
# accepted, kept in the raw copy and skipped by every stage.
Role = Literal["system", "user", "assistant"]

CandidateStrategy = Literal["tag", "quoted", "label"]

UNKNOWN_ENTITY = "unknown"


class Message(BaseModel):
    """A single chat message as posted by the roleplay front-end.

    Unknown keys (name, tool_calls, ...) are kept so the raw copy written to
    disk matches what the client sent.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    role: str
    content: str | list[dict[str, Any]] | None = None

    @property
    def text(self) -> str:
        """Content as plain text; OpenAI content parts are joined by newlines."""
        if self.content is None:
            return ""
        if isinstance(self.content, str):
            return self.content
        parts = [p.get("text", "") for p in self.content if p.get("type", "text") == "text"]
        return "\n".join(p for p in parts if isinstance(p, str))


Conversation = list[Message]


@dataclass(frozen=True, slots=True)
class TagBlock:
    """A paired `<label>...</label>` block found by the tag parser."""

    label: str
    content: str  # raw inner text, nested tags included
    start: int  # offset of the opening "<"
    end: int  # offset just past the closing ">"
    children: tuple[TagBlock, ...] = ()


@dataclass(frozen=True, slots=True)
class EntityCandidate:
    """A possible character name pulled out of system-message text."""

    name: str
    message_index: int
    start: int
    end: int
    strategy: CandidateStrategy

    @property
    def span(self) -> tuple[int, int, int]:
        return (self.message_index, self.start, self.end)

    @property
    def strength(self) -> str:
        return {"tag": "strong", "quoted": "medium", "label": "weak"}[self.strategy]


@dataclass(frozen=True, slots=True)
class ResolvedCharacters:
    """Who the human is playing (if detectable) and who the assistant is."""

    ai_entity: str = UNKNOWN_ENTITY
    user_entity: str | None = None


@dataclass(frozen=True, slots=True)
class LogTarget:
    identifier_key: str
    path: str


@dataclass(slots=True)
class LogResult:
    """Outcome of one Log Router invocation."""

    target: LogTarget
    header_written: bool = False
    fallback: bool = False
    error: str | None = None
    raw_path: str | None = None


@dataclass(slots=True)
class PipelineResult:
    candidates: list[EntityCandidate] = field(default_factory=list)
    characters: ResolvedCharacters = field(default_factory=ResolvedCharacters)
    transcript: str = ""
    log: LogResult | None = None
