from __future__ import annotations

_ESCAPES = str.maketrans(
    {
        "\\": "\\\\",
        '"': '\\"',
        "\n": "\\n",
        "\r": "\\r",
        "\t": "\\t",
    }
)


def escape_graphql_string(text: str) -> str:
    """Escape text for a double-quoted GraphQL string literal."""
    return text.translate(_ESCAPES)
