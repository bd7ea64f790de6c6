from __future__ import annotations

import re

_WHITESPACE_RE = re.compile(r"\s+")
_TRAILING_DOTS_RE = re.compile(r"\.+$")


def normalize_team_name(name: str | None) -> str:
    """Return the aggregation key for a team display name.

    NBSP becomes a plain space, whitespace runs collapse to one space, the
    result is trimmed and trailing periods are removed. Historical records
    are keyed on exactly this form, so keep it stable.

    Example:
        >>> normalize_team_name("Foo\\u00a0 Bar.")
        'Foo Bar'
    """
    if not name:
        return ""
    text = name.replace("\u00a0", " ")
    text = _WHITESPACE_RE.sub(" ", text).strip()
    return _TRAILING_DOTS_RE.sub("", text)


def display_team_name(name: str | None) -> str:
    return (name or "").strip()
