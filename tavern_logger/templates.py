"""Handlebars banners written into the per-character log files.

A log file opens with a header banner (once per file, see the Log Router)
and every request adds an entry banner followed by the transcript. Both
banners can be replaced from the environment (LOG_HEADER_TEMPLATE /
LOG_ENTRY_TEMPLATE).

Header context: character, created
Entry context:  timestamp, transcript

Values go in triple-stash; the default double-stash would HTML-escape the
transcript's <tag> blocks and its {{user}} placeholders.
"""

from collections.abc import Callable
from typing import Any

import pybars

DEFAULT_HEADER_TEMPLATE = "LOG FILE FOR CHARACTER: {{{character}}}\nCreated: {{{created}}}\n"

DEFAULT_ENTRY_TEMPLATE = "\n==== Request at {{{timestamp}}} ====\n{{{transcript}}}\n"

_compiler = pybars.Compiler()
_banners: dict[str, Callable] = {}


class TemplateError(Exception):
    """A banner template failed to compile or render."""


def _banner(source: str) -> Callable:
    # A router renders the same two sources on every request
    if source not in _banners:
        _banners[source] = _compiler.compile(source)
    return _banners[source]


def render_template(source: str, context: dict[str, Any]) -> str:
    try:
        return str(_banner(source)(context))
    except Exception as e:
        raise TemplateError(f"Cannot render log banner: {e}") from e
