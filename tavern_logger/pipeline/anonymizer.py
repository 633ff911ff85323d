"""Replace the user's character name with a placeholder before logging.

Three passes, each over the previous pass's output and each replacing all
occurrences:

  1. "Name:" at the start of a line (speaker prefixes)
  2. Name as a whole word
  3. Name as a raw substring (names with symbols that defeat \\b)

Pass 3 will also hit the name inside unrelated words ("Sam" in "Samuel").
That over-replacement is accepted; log readers rely on the name never
surviving.

Placeholders already in the text are skipped, so anonymize() is
idempotent.
"""

import re

USER_PLACEHOLDER = "{{user}}"


def _protected_sub(pattern: str, replacement: str, text: str, placeholder: str) -> str:
    """re.sub that leaves existing placeholder tokens untouched."""
    combined = re.compile(f"({re.escape(placeholder)})|{pattern}", re.MULTILINE)
    return combined.sub(lambda m: m.group(1) or replacement, text)


def anonymize(content: str, user_entity: str | None, placeholder: str = USER_PLACEHOLDER) -> str:
    """Return content with every mention of user_entity replaced.

    No-op when user_entity is empty or does not occur in content.
    """
    if not content or not user_entity or user_entity not in content:
        return content

    name = re.escape(user_entity)
    text = _protected_sub(rf"^{name}:", f"{placeholder}:", content, placeholder)
    text = _protected_sub(rf"(?<!\w){name}(?!\w)", placeholder, text, placeholder)
    text = _protected_sub(name, placeholder, text, placeholder)
    return text
