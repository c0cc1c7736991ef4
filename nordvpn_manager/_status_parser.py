"""Parse ``nordvpn status`` output into an ordered field mapping."""

from __future__ import annotations

import logging

from ._vpn_models import ConnectionStatus, MalformedStatusLine

logger = logging.getLogger(__name__)


def parse_status(raw_text: str) -> ConnectionStatus:
    """Parse colon-delimited ``key: value`` lines.

    The whole text is trimmed and split on newlines. Each non-blank line is
    split once on its first colon and both halves are trimmed, so values may
    themselves contain colons. A repeated key keeps the position of its first
    occurrence and the value of its last. Lines without a colon, or with an
    empty key, are skipped and recorded as diagnostics.

    Parameters
    ----------
    raw_text : str
        Standard output of the status query.

    Returns
    -------
    ConnectionStatus
        Parsed fields in source order plus any malformed lines.

    Examples
    --------
    >>> status = parse_status("Status: Connected\\nCountry: Japan\\nServer: jp123\\n")
    >>> list(status.items())
    [('Status', 'Connected'), ('Country', 'Japan'), ('Server', 'jp123')]
    >>> dict(parse_status("A: 1\\nB: 2\\nA: 3\\n"))
    {'A': '3', 'B': '2'}
    >>> len(parse_status(""))
    0
    """

    fields: dict[str, str] = {}
    diagnostics: list[MalformedStatusLine] = []
    for line_number, line in enumerate(raw_text.strip().split("\n"), start=1):
        line = line.rstrip("\r")
        if not line.strip():
            continue
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            logger.warning("Skipping malformed status line %d: %r", line_number, line)
            diagnostics.append(MalformedStatusLine(line_number, line))
            continue
        fields[key] = value.strip()
    return ConnectionStatus(fields=fields, diagnostics=tuple(diagnostics))
