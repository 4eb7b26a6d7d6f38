from __future__ import annotations

import os
import urllib.parse
from dataclasses import dataclass

from kgannotate.core.errors import ConfigurationError

DEFAULT_ENDPOINT = "http://localhost:8080/graphql"


@dataclass(frozen=True)
class LoaderSettings:
    endpoint: str
    timeout_seconds: float | None


def load_settings(endpoint: str | None = None) -> LoaderSettings:
    resolved = (endpoint or os.getenv("KGANNOTATE_ENDPOINT") or DEFAULT_ENDPOINT).strip()

    parsed = urllib.parse.urlparse(resolved)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigurationError(f"GraphQL endpoint must be an http(s) URL: {resolved!r}")

    return LoaderSettings(
        endpoint=resolved,
        timeout_seconds=_read_timeout_env("KGANNOTATE_HTTP_TIMEOUT_SECONDS"),
    )


def _read_timeout_env(name: str) -> float | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        value = float(raw)
    except ValueError:
        return None
    return value if value > 0 else None
