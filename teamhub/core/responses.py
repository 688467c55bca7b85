"""
Response rendering helpers.
Every endpoint renders either JSON or, for the "js" format, JSON wrapped
in a caller-supplied callback (JSONP).
"""
from __future__ import annotations

import json
import re
from typing import Any

from fastapi import Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

JS_MEDIA_TYPE = "text/javascript"

_CALLBACK_RE = re.compile(r"^[A-Za-z_$][\w$.]*$")


def wants_js(request: Request) -> bool:
    """True when the client asked for the JSON-with-callback format."""
    if request.query_params.get("format") == "js":
        return True
    return "javascript" in request.headers.get("accept", "")


def jsonp_callback(request: Request) -> str | None:
    callback = request.query_params.get("callback")
    if callback and _CALLBACK_RE.match(callback):
        return callback
    return None


def render(request: Request, content: Any, status_code: int = status.HTTP_200_OK) -> Response:
    """Render content as JSON, or as a JSONP call when the js format was requested."""
    payload = jsonable_encoder(content)
    callback = jsonp_callback(request)
    if callback and wants_js(request):
        return Response(
            content=f"{callback}({json.dumps(payload)});",
            status_code=status_code,
            media_type=JS_MEDIA_TYPE,
        )
    return JSONResponse(content=payload, status_code=status_code)


def api_respond(request: Request, payload: dict[str, Any]) -> Response:
    return render(request, payload)


def api_status(request: Request, status_code: int) -> Response:
    return render(request, {"status": status_code}, status_code=status_code)


def handle_api_success(
    request: Request,
    payload: dict[str, Any] | None = None,
    *,
    is_new: bool = False,
    status_code: int | None = None,
) -> Response:
    """
    Success response for mutations.
    New records are echoed back with 201; anything else gets an empty
    200 (JSON) or a {"status": ...} body (js).
    """
    if is_new:
        return render(request, payload, status_code=status_code or status.HTTP_201_CREATED)
    code = status_code or status.HTTP_200_OK
    if wants_js(request):
        return api_status(request, code)
    return Response(status_code=code)
