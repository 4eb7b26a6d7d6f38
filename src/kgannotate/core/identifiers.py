from __future__ import annotations

import re

from kgannotate.core.errors import EmptyIdentifierError

NAME_ID_SEPARATOR = "::"

_WHITESPACE_RUN = re.compile(r"\s+")
_DISALLOWED = re.compile(r"[^a-z0-9_\-]")
_ALNUM = re.compile(r"[a-z0-9]")


def normalize_name_text(text: str) -> str:
    """Lowercase, trim, underscore whitespace runs and drop anything outside [a-z0-9_-]."""
    collapsed = _WHITESPACE_RUN.sub("_", text.lower().strip())
    return _DISALLOWED.sub("", collapsed)


def derive_name_id(text: str, prefix: str) -> str:
    """Build the stable ``<prefix>::<normalized>`` key used for upserts.

    The same text under the same prefix always yields the same id, which is
    what lets the store merge repeated entities across documents and runs.
    A normalized key made only of separators (``_``/``-``) is rejected: every
    such text, e.g. any Devanagari name, would otherwise merge into one node.
    """
    normalized = normalize_name_text(text)
    if not _ALNUM.search(normalized):
        raise EmptyIdentifierError(
            f"Entity text {text!r} has no identifier characters; cannot derive a {prefix}{NAME_ID_SEPARATOR} name_id"
        )
    return f"{prefix}{NAME_ID_SEPARATOR}{normalized}"
