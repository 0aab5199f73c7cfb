from __future__ import annotations

import logging
import uuid
from typing import Any

from flask import Request, g, jsonify, request

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Typed API error that can be raised within routes to return JSON errors.

    Attributes
    ----------
    message: str
        Human-readable error message
    status: int
        HTTP status code (default 400)
    code: Optional[int | str]
        Optional application-specific error code
    details: Optional[dict[str, Any]]
        Optional structured details to aid clients
    """

    def __init__(
        self,
        message: str,
        status: int = 400,
        code: int | str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.code = code
        self.details = details


def get_request_id() -> str | None:
    """Return a stable per-request id if a request context exists.

    - Prefer an existing value in flask.g
    - Else prefer inbound header 'X-Request-Id'
    - Else generate a new uuid4 and store in flask.g
    - If no request context, return None
    """
    try:
        _ = request.path  # raises outside a request context
    except RuntimeError:
        return None
    rid_existing: str | None = getattr(g, "request_id", None)
    if rid_existing:
        return rid_existing
    rid_hdr: str | None = request.headers.get("X-Request-Id")
    if rid_hdr:
        g.request_id = rid_hdr
        return rid_hdr
    rid_gen = str(uuid.uuid4())
    g.request_id = rid_gen
    return rid_gen


def json_error(
    message: str,
    status: int = 400,
    code: int | str | None = None,
    details: dict[str, Any] | None = None,
):
    payload: dict[str, Any] = {"error": message}
    if code is not None:
        payload["code"] = code
    if details is not None:
        payload["details"] = details
    rid = get_request_id()
    if rid is not None:
        payload["request_id"] = rid
    return jsonify(payload), status


def wants_json(req: Request | None = None) -> bool:
    """Heuristic to decide if the current request expects JSON.

    We keep this conservative to avoid affecting HTML and SVG routes.
    """
    r = req or request
    accept_json = r.accept_mimetypes.accept_json and not r.accept_mimetypes.accept_html
    is_api_path = r.path.startswith("/api/")
    return bool(accept_json or is_api_path)
