"""File-based log storage, one text log and one raw JSON copy per character.

Data layout:
  logs/
    request_<key>.log       Append-only readable transcripts for a character.
                            Starts with a header block:
                              LOG FILE FOR CHARACTER: <name>
                              Created: <ISO-8601>
                            then one entry per request:
                              ==== Request at <ISO-8601> ====
                              <transcript>
    request_<key>_raw.json  The last request's messages exactly as posted,
                            pretty-printed; overwritten on every request.
    error-log.log           Entries that could not be written to their
                            own log, with the error message.

Key rules: name → Unicode normalize → strip non-ASCII → lowercase → drop
everything but letters, digits and whitespace → whitespace runs become "_".
An empty result is "unknown".
"""

from .core import (  # noqa: F401
    FALLBACK_LOG_NAME,
    UNKNOWN_KEY,
    identifier_key,
    init_logs_dir,
    log_filename,
    raw_filename,
)
from .logs import LogStore  # noqa: F401
