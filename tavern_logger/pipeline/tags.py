"""Tag parsing and entity-candidate extraction from system prompts.

Roleplay front-ends describe the assistant's character inside the system
prompt, usually as a labelled block:

    <system>...house rules...</system>
    <Nova's Persona>Name: Nova
    Personality: bold and kind ...</Nova's Persona>
    <scenario>...</scenario>

Older character cards use W++ style `Name("Nova")` or a bare `Name: Nova`
line instead. Each system message is tried against three strategies in
order; the first that yields anything wins for that message:

  tag     top-level paired blocks that look like a character description
  quoted  every Name("...") declaration
  label   every Name: ... declaration (up to a comma or line break)

Parsing (parse_tags) and classification (is_entity_block) are separate so
either can be tested on its own.
"""

import re
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field

from tavern_logger.models import EntityCandidate, Message, TagBlock

STRUCTURAL_LABELS = frozenset({
    "system",
    "scenario",
    "example_dialogs",
    "roleplay_guidelines",
    "/",
})

DESCRIPTOR_KEYWORDS = ("name:", "age:", "personality:", "character details")

SUBSTANTIAL_LENGTH = 200

_SYSTEM_WRAPPER_RE = re.compile(r"<system>.*?</system>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<(/?)([^<>\n]{1,120})>")
_LABEL_SUFFIX_RE = re.compile(
    r"^(.+?)(?:['’]s)?\s+(?:persona|character|profile)$", re.IGNORECASE
)
_QUOTED_NAME_RE = re.compile(r"\bName\(\s*\"([^\"\n]+)\"\s*\)", re.IGNORECASE)
_LABEL_NAME_RE = re.compile(r"(?<!\w)Name:[ \t]*([^,\n\r<]+)", re.IGNORECASE)


# ── Parsing ──────────────────────────────────────────────


def strip_system_wrapper(text: str) -> str:
    """Remove <system>...</system> blocks so "system" is never a candidate."""
    return _SYSTEM_WRAPPER_RE.sub("", text)


@dataclass
class _OpenTag:
    label: str
    start: int
    content_start: int
    children: list[TagBlock] = field(default_factory=list)


def _find_open(stack: list[_OpenTag], label: str) -> int | None:
    for i in range(len(stack) - 1, -1, -1):
        if stack[i].label == label:
            return i
    folded = label.casefold()
    for i in range(len(stack) - 1, -1, -1):
        if stack[i].label.casefold() == folded:
            return i
    return None


def parse_tags(text: str) -> list[TagBlock]:
    """Parse paired <label>...</label> blocks into a tree.

    Stack based: a closing tag pairs with the nearest open tag of the same
    label (exact match first, then case-insensitive), so nested blocks that
    share a label pair correctly. Tags left open are dropped; blocks they
    contained are re-parented to the enclosing block. Stray closing tags
    and self-closing tags are ignored.

    Returns the top-level blocks in document order.
    """
    stack: list[_OpenTag] = []
    top: list[TagBlock] = []

    for m in _TAG_RE.finditer(text):
        closing = m.group(1) == "/"
        label = m.group(2).strip()
        if not label or label.endswith("/"):
            continue
        if not closing:
            stack.append(_OpenTag(label=label, start=m.start(), content_start=m.end()))
            continue

        idx = _find_open(stack, label)
        if idx is None:
            continue
        orphans = stack[idx + 1:]
        del stack[idx + 1:]
        opened = stack.pop()
        children = list(opened.children)
        for orphan in orphans:
            children.extend(orphan.children)
        children.sort(key=lambda b: b.start)

        block = TagBlock(
            label=opened.label,
            content=text[opened.content_start:m.start()],
            start=opened.start,
            end=m.end(),
            children=tuple(children),
        )
        if stack:
            stack[-1].children.append(block)
        else:
            top.append(block)

    # Blocks nested in tags that never closed surface at top level
    for orphan in stack:
        top.extend(orphan.children)
    top.sort(key=lambda b: b.start)
    return top


# ── Classification ───────────────────────────────────────


def entity_name(label: str) -> str:
    """Reduce a block label to the character name it describes.

    "Nova's Persona" → "Nova"; "Nova" → "Nova".
    """
    label = label.strip()
    m = _LABEL_SUFFIX_RE.match(label)
    return m.group(1).strip() if m else label


def is_structural(name: str) -> bool:
    return name.strip().casefold() in STRUCTURAL_LABELS


def is_substantial(content: str) -> bool:
    """True if the block reads like a character description."""
    lowered = content.lower()
    if any(keyword in lowered for keyword in DESCRIPTOR_KEYWORDS):
        return True
    return len(content.strip()) > SUBSTANTIAL_LENGTH


def is_entity_block(block: TagBlock) -> bool:
    name = entity_name(block.label)
    if not name or is_structural(name) or is_structural(block.label):
        return False
    return is_substantial(block.content)


# ── Extraction strategies ────────────────────────────────


def _tag_candidates(index: int, text: str) -> list[EntityCandidate]:
    return [
        EntityCandidate(
            name=entity_name(block.label),
            message_index=index,
            start=block.start,
            end=block.end,
            strategy="tag",
        )
        for block in parse_tags(text)
        if is_entity_block(block)
    ]


def _regex_candidates(
    pattern: re.Pattern, strategy: str
) -> Callable[[int, str], list[EntityCandidate]]:
    def scan(index: int, text: str) -> list[EntityCandidate]:
        out: list[EntityCandidate] = []
        for m in pattern.finditer(text):
            name = m.group(1).strip()
            if name:
                out.append(EntityCandidate(
                    name=name,
                    message_index=index,
                    start=m.start(1),
                    end=m.end(1),
                    strategy=strategy,
                ))
        return out
    return scan


STRATEGIES: tuple[Callable[[int, str], list[EntityCandidate]], ...] = (
    _tag_candidates,
    _regex_candidates(_QUOTED_NAME_RE, "quoted"),
    _regex_candidates(_LABEL_NAME_RE, "label"),
)


def extract_candidates(
    messages: Sequence[Message],
    roles: Iterable[str] = ("system",),
) -> list[EntityCandidate]:
    """Scan messages for candidate character names.

    Only system messages are scanned by default: that is where the
    assistant's character is declared. Pass roles=("system", "user",
    "assistant") to scan everything. Spans index into the message text with
    <system> wrappers removed. Duplicates are kept.
    """
    wanted = set(roles)
    candidates: list[EntityCandidate] = []
    for index, message in enumerate(messages):
        if message.role not in wanted:
            continue
        text = strip_system_wrapper(message.text)
        if not text.strip():
            continue
        for strategy in STRATEGIES:
            found = strategy(index, text)
            if found:
                candidates.extend(found)
                break
    return candidates
