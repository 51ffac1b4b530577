from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Mapping, Optional

import requests

from ..core.exceptions import SourceUnavailable
from .connection import ApiConnection

logger = logging.getLogger(__name__)


@contextmanager
def api_call(source: str) -> Iterator[None]:
    """Translate transport failures into SourceUnavailable.

    requests raises Timeout / ConnectionError / other RequestException
    subclasses; a body that is not JSON surfaces as ValueError.
    """

    try:
        yield
    except requests.Timeout as exc:
        raise SourceUnavailable(source, "request timed out") from exc
    except requests.RequestException as exc:
        raise SourceUnavailable(source, str(exc) or exc.__class__.__name__) from exc
    except ValueError as exc:
        raise SourceUnavailable(source, "invalid JSON response") from exc


def _as_payload(response, source: str) -> Dict[str, Any]:
    payload = response.json()
    if not isinstance(payload, dict):
        raise SourceUnavailable(source, f"unexpected payload type {type(payload).__name__}")
    return payload


def get_json(conn: ApiConnection, path: str, *, params: Optional[Mapping[str, Any]] = None, source: str) -> Dict[str, Any]:
    query = {k: v for k, v in (params or {}).items() if v is not None}
    with api_call(source):
        response = conn.session().get(conn.url(path), params=query, timeout=conn.timeout)
        payload = _as_payload(response, source)
    logger.debug("GET %s %s -> %s", path, query, getattr(response, "status_code", "?"))
    return payload


def post_json(conn: ApiConnection, path: str, *, body: Mapping[str, Any], source: str) -> Dict[str, Any]:
    with api_call(source):
        response = conn.session().post(conn.url(path), json=dict(body), timeout=conn.timeout)
        payload = _as_payload(response, source)
    logger.debug("POST %s -> %s", path, getattr(response, "status_code", "?"))
    return payload


def unwrap_data(payload: Mapping[str, Any], *, source: str) -> List[Dict[str, Any]]:
    """Return the `data` list of a `{success, data}` envelope."""

    if not payload.get("success"):
        raise SourceUnavailable(source, str(payload.get("message") or "success=false"))
    data = payload.get("data")
    if data is None:
        return []
    if not isinstance(data, list):
        raise SourceUnavailable(source, "data is not a list")
    return [row for row in data if isinstance(row, dict)]
