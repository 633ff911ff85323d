"""Route a formatted transcript to its character's log files.

For the resolved assistant character:
  1. Derive the identifier key (storage.identifier_key).
  2. Mark the key in the SeenCache; the first mark in this process, or a
     missing log file, means the entry is preceded by a header block.
  3. Append header (maybe) + entry to request_<key>.log.
  4. Overwrite request_<key>_raw.json with the raw messages.

Steps 2–4 for one key run under a per-key asyncio.Lock, so concurrent
requests for the same character in this process cannot interleave or
double the header. Separate processes sharing a logs dir are not
coordinated. Like the SeenCache, the lock table only grows: one lock per
identifier key for the lifetime of the router.

Any write failure is caught here. The entry goes to error-log.log instead
and route() still returns normally.
"""

import asyncio
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any

from tavern_logger.models import LogResult, LogTarget
from tavern_logger.storage import LogStore, identifier_key
from tavern_logger.templates import (
    DEFAULT_ENTRY_TEMPLATE,
    DEFAULT_HEADER_TEMPLATE,
    TemplateError,
    render_template,
)

logger = logging.getLogger(__name__)


class SeenCache:
    """Identifier keys that already got a header during this process run.

    In memory only, no eviction. A restart starts empty, so the first
    request after a restart writes a fresh header into an existing file.
    """

    def __init__(self) -> None:
        self._seen: set[str] = set()

    def mark(self, key: str) -> bool:
        """Record key; True if this is the first time it was seen."""
        if key in self._seen:
            return False
        self._seen.add(key)
        return True

    def __contains__(self, key: str) -> bool:
        return key in self._seen

    def __len__(self) -> int:
        return len(self._seen)


class LogRouter:
    def __init__(
        self,
        store: LogStore,
        seen: SeenCache | None = None,
        *,
        header_template: str = DEFAULT_HEADER_TEMPLATE,
        entry_template: str = DEFAULT_ENTRY_TEMPLATE,
    ) -> None:
        self.store = store
        self.seen = seen if seen is not None else SeenCache()
        self._header_template = header_template
        self._entry_template = entry_template
        self._locks: defaultdict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def target_for(self, ai_entity: str) -> LogTarget:
        key = identifier_key(ai_entity)
        return LogTarget(identifier_key=key, path=str(self.store.log_path(key)))

    def render_header(self, ai_entity: str, created: str) -> str:
        return render_template(self._header_template, {"character": ai_entity, "created": created})

    def render_entry(self, transcript: str, timestamp: str) -> str:
        return render_template(self._entry_template, {"timestamp": timestamp, "transcript": transcript})

    async def route(
        self,
        ai_entity: str,
        transcript: str,
        raw_messages: list[dict[str, Any]],
    ) -> LogResult:
        """Append the transcript to the character's log and save the raw copy."""
        target = self.target_for(ai_entity)
        key = target.identifier_key
        first_seen = self.seen.mark(key)
        now = datetime.now(timezone.utc).isoformat()

        async with self._locks[key]:
            try:
                log_path = self.store.log_path(key)
                exists = await asyncio.to_thread(self.store.exists, log_path)
                write_header = first_seen or not exists
                text = self.render_entry(transcript, now)
                if write_header:
                    text = self.render_header(ai_entity, now) + text
                await asyncio.to_thread(self.store.append_text, log_path, text)

                raw_path = self.store.raw_path(key)
                await asyncio.to_thread(self.store.write_json, raw_path, raw_messages)
            except (OSError, TypeError, ValueError, TemplateError) as e:
                logger.warning("Log write failed for %r (%s): %s", ai_entity, key, e)
                return await self._write_fallback(target, ai_entity, transcript, e, now)

        logger.info(
            "Logged request for %r to %s%s", ai_entity, log_path.name,
            " (new header)" if write_header else "",
        )
        return LogResult(target=target, header_written=write_header, raw_path=str(raw_path))

    async def _write_fallback(
        self,
        original: LogTarget,
        ai_entity: str,
        transcript: str,
        error: Exception,
        timestamp: str,
    ) -> LogResult:
        path = self.store.fallback_path()
        fallback = LogTarget(identifier_key="error-log", path=str(path))
        text = (
            f"\n==== Failed write at {timestamp} ====\n"
            f"Character: {ai_entity}\n"
            f"Target: {original.path}\n"
            f"Error: {error}\n"
            f"{transcript}\n"
        )
        try:
            await asyncio.to_thread(self.store.append_text, path, text)
        except (OSError, ValueError):
            logger.exception("Fallback log write failed for %r", ai_entity)
        return LogResult(target=fallback, fallback=True, error=str(error))
