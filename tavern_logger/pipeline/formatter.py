"""Render a conversation as a readable, role-segmented transcript.

Each non-empty message becomes one section:

    ### USER MESSAGE ###
    {{user}}: hi Nova
    ========================================

Sections are separated by a blank line. System messages keep their tag
structure, one normalized block per top-level tag pair:

    <Nova>
    Name: Nova
    Personality: ...
    </Nova>

Assistant messages are wrapped in <firstmessage>...</firstmessage>, user
messages are emitted as-is. Literal "\\n" escape sequences (common in
character cards pasted from JSON) become real line breaks, and the user's
character name is anonymized everywhere.
"""

from collections.abc import Sequence

from tavern_logger.models import Message, Role

from .anonymizer import anonymize
from .tags import parse_tags

SEPARATOR = "=" * 40

BANNERS: dict[Role, str] = {
    "system": "### SYSTEM MESSAGE ###",
    "user": "### USER MESSAGE ###",
    "assistant": "### ASSISTANT MESSAGE ###",
}


def normalize_newlines(text: str) -> str:
    """Turn literal \\r\\n and \\n escape sequences into line breaks."""
    return text.replace("\\r\\n", "\n").replace("\\n", "\n")


def _clean(text: str, user_entity: str | None) -> str:
    return anonymize(normalize_newlines(text), user_entity)


def render_system(content: str, user_entity: str | None) -> str:
    blocks = parse_tags(content)
    if not blocks:
        return _clean(content, user_entity)
    rendered = []
    for block in blocks:
        inner = _clean(block.content, user_entity).strip()
        rendered.append(f"<{block.label}>\n{inner}\n</{block.label}>")
    return "\n\n".join(rendered)


def render_assistant(content: str, user_entity: str | None) -> str:
    return f"<firstmessage>\n{_clean(content, user_entity)}\n</firstmessage>"


def render_user(content: str, user_entity: str | None) -> str:
    return _clean(content, user_entity)


_RENDERERS = {
    "system": render_system,
    "user": render_user,
    "assistant": render_assistant,
}


def format_message(message: Message, user_entity: str | None) -> str | None:
    """Render one section, or None if the message has no content or a role
    without a transcript section."""
    renderer = _RENDERERS.get(message.role)
    content = message.text
    if renderer is None or not content or not content.strip():
        return None
    body = renderer(content, user_entity)
    return f"{BANNERS[message.role]}\n{body}\n{SEPARATOR}"


def format_transcript(messages: Sequence[Message], user_entity: str | None) -> str:
    sections = [format_message(m, user_entity) for m in messages]
    return "\n\n".join(s for s in sections if s is not None)
