"""Conditional GET helpers for cacheable JSON reads."""
import base64
import hashlib
import json
from typing import Any, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from starlette.responses import Response

from restops.config import settings


def cache_control_value() -> str:
    return (
        f"public, s-maxage={settings.PROGRESS_CACHE_MAX_AGE}, "
        f"stale-while-revalidate={settings.PROGRESS_CACHE_STALE_WHILE_REVALIDATE}, max-age=0"
    )


def weak_etag(body: bytes) -> str:
    """Weak validator over the serialized body."""
    digest = base64.b64encode(hashlib.sha1(body).digest()).decode("ascii")
    return f'W/"{digest}"'


def _etag_matches(header: Optional[str], etag: str) -> bool:
    if not header:
        return False
    candidates = [value.strip() for value in header.split(",")]
    # Weak comparison: the W/ prefix is ignored on both sides
    opaque = etag[2:] if etag.startswith("W/") else etag
    return any(
        candidate == "*" or (candidate[2:] if candidate.startswith("W/") else candidate) == opaque
        for candidate in candidates
    )


def cached_json_response(request: Request, content: Any) -> Response:
    """JSON response with ETag and Cache-Control; 304 when the client copy is current."""
    body = json.dumps(jsonable_encoder(content), ensure_ascii=False, separators=(",", ":")).encode("utf-8")
    etag = weak_etag(body)
    headers = {"ETag": etag, "Cache-Control": cache_control_value()}

    if _etag_matches(request.headers.get("If-None-Match"), etag):
        return Response(status_code=304, headers=headers)

    return Response(content=body, media_type="application/json", headers=headers)
