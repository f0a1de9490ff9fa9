"""Error extraction from provisioner build logs.

Provisioner output is plain text that occasionally embeds a JSON error
payload inline, e.g.::

    Error: ... but got 403 instead: {"forbidden": {"code": 403, "message": "Quota exceeded for ram"}}

Most lines are not valid JSON, so messages are picked out with a pattern
instead of a parser.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from coderjob.adapter.models.workspace import BuildLogEntry

# "message": "<text>" where <text> may hold escaped quotes but no bare quote
_MESSAGE_RE = re.compile(r'"message":\s*"((?:[^"\\]|\\.)+)"')


def extract_errors(entries: Iterable[BuildLogEntry]) -> list[list[str]]:
    """Return the embedded messages of each log entry, one list per entry.

    Entries with empty output or without any message are skipped; source
    order is preserved.  The result is not flattened.
    """
    errors: list[list[str]] = []
    for entry in entries:
        if not entry.output:
            continue
        messages = _MESSAGE_RE.findall(entry.output)
        if messages:
            errors.append(messages)
    return errors


def flatten_errors(errors: Iterable[list[str]]) -> list[str]:
    return [message for messages in errors for message in messages]
