"""Transcript logging pipeline.

Runs once per posted conversation, strictly in order:
  1. Tag extractor — scan system messages for character declarations
     (<Name>...</Name> blocks, Name("X"), Name: X) → candidate names.
  2. Character resolver — drop structural tags (system, scenario, ...),
     dedupe, then pick the user's character (most recent "Label:" user
     message) and the assistant's character (first candidate that is not
     the user's; "unknown" if there are none).
  3. Anonymizer — replace the user's character name with {{user}}.
  4. Formatter — role banners, normalized tag blocks, <firstmessage>
     wrapper for assistant turns, 40-char "=" rule between sections.
  5. Log router — append to logs/request_<key>.log (header on first write),
     overwrite logs/request_<key>_raw.json, fall back to error-log.log.

Stages 1–4 are pure (process_conversation); stage 5 writes files
(run_pipeline).
"""

from .anonymizer import USER_PLACEHOLDER, anonymize  # noqa: F401
from .core import ProcessedConversation, process_conversation, run_pipeline  # noqa: F401
from .formatter import SEPARATOR, format_transcript, normalize_newlines  # noqa: F401
from .resolver import (  # noqa: F401
    DisambiguateStrategy,
    FirstCandidateStrategy,
    LastUserLabelStrategy,
    NoCandidateStrategy,
    SingleCandidateStrategy,
    detect_user_entity,
    filter_candidates,
    normalized_key,
    resolve_characters,
)
from .router import LogRouter, SeenCache  # noqa: F401
from .tags import (  # noqa: F401
    entity_name,
    extract_candidates,
    is_entity_block,
    parse_tags,
    strip_system_wrapper,
)
