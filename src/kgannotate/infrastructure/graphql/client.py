from __future__ import annotations

import http.client
import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MutationResult:
    success: bool
    data: object | None = None
    errors: list[dict[str, object]] = field(default_factory=list)


class GraphQLClient:
    """Blocking GraphQL-over-HTTP client. One POST per call, no retries."""

    def __init__(self, endpoint: str, timeout: float | None = None) -> None:
        self.endpoint = endpoint
        self.timeout = timeout

    def execute(self, query: str, variables: dict[str, object] | None = None) -> MutationResult:
        body: dict[str, object] = {"query": query}
        if variables:
            body["variables"] = variables
        request = urllib.request.Request(
            self.endpoint,
            data=json.dumps(body).encode("utf-8"),
            headers={"Content-Type": "application/json"},
            method="POST",
        )
        open_kwargs: dict[str, float] = {} if self.timeout is None else {"timeout": self.timeout}

        try:
            with urllib.request.urlopen(request, **open_kwargs) as response:
                raw = response.read()
        except urllib.error.HTTPError as exc:
            return _result_from_http_error(exc)
        except (urllib.error.URLError, OSError, http.client.HTTPException, ValueError) as exc:
            reason = getattr(exc, "reason", None) or exc
            logger.debug("GraphQL request to %s failed: %s", self.endpoint, reason)
            return MutationResult(success=False, errors=[{"message": str(reason)}])

        return _result_from_body(raw)


def _result_from_body(raw: bytes) -> MutationResult:
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        return MutationResult(success=False, errors=[{"message": f"Invalid JSON response: {exc}"}])

    if not isinstance(payload, dict):
        return MutationResult(success=False, errors=[{"message": "GraphQL response is not a JSON object"}])

    errors = payload.get("errors")
    if isinstance(errors, list) and errors:
        return MutationResult(success=False, data=payload.get("data"), errors=[_as_error(e) for e in errors])
    return MutationResult(success=True, data=payload.get("data"))


def _result_from_http_error(exc: urllib.error.HTTPError) -> MutationResult:
    fallback: dict[str, object] = {"message": f"HTTP {exc.code}: {exc.reason}"}
    try:
        payload = json.loads(exc.read().decode("utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError):
        return MutationResult(success=False, errors=[fallback])

    # Dgraph reports schema/validation problems in the body even on 4xx.
    if isinstance(payload, dict):
        errors = payload.get("errors")
        if isinstance(errors, list) and errors:
            return MutationResult(success=False, data=payload.get("data"), errors=[_as_error(e) for e in errors])
    return MutationResult(success=False, errors=[fallback])


def _as_error(item: object) -> dict[str, object]:
    if isinstance(item, dict):
        return {str(k): v for k, v in item.items()}
    return {"message": str(item)}
