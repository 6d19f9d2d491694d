from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any, Dict, Iterable, List, Optional, Tuple

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from merchant_intake.utils import env_bool, env_int

logger = logging.getLogger("merchant_intake.http")


# Lower-cased; matched against JSON keys and header names.
_SENSITIVE_KEYS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "apikey",
    "token",
    "secret",
    "password",
    "supabase_service_role_key",
    "websitepassword",
    "website_password",
    "websitelogin",
    "website_login",
}


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: ("***" if str(k).lower() in _SENSITIVE_KEYS else _redact(v)) for k, v in value.items()}
    if isinstance(value, list):
        return [_redact(v) for v in value]
    return value


def _header(headers: Iterable[Tuple[bytes, bytes]], name: bytes) -> str:
    for k, v in headers:
        if k.lower() == name:
            return v.decode("latin-1", errors="replace")
    return ""


def _decode_headers(headers: Iterable[Tuple[bytes, bytes]]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for k, v in headers:
        ks = k.decode("latin-1").lower()
        out[ks] = "***" if ks in _SENSITIVE_KEYS else v.decode("latin-1", errors="replace")
    return out


def _parse_body(content_type: str, body: bytes) -> Any:
    ct = content_type.lower()
    if "application/json" in ct:
        try:
            return _redact(json.loads(body.decode("utf-8", errors="replace")))
        except ValueError:
            return body.decode("utf-8", errors="replace")
    if ct.startswith("text/"):
        return body.decode("utf-8", errors="replace")
    if not body:
        return ""
    return "<binary>"


class _BodyCapture:
    """Keeps at most `limit` bytes of a streamed body."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.buf = bytearray()
        self.truncated = False

    def feed(self, chunk: bytes) -> None:
        if not chunk or self.limit <= 0 or self.truncated:
            return
        remaining = self.limit - len(self.buf)
        self.buf.extend(chunk[:remaining])
        if len(chunk) > remaining:
            self.truncated = True


class HttpLoggingMiddleware:
    """One JSON log line per request, with secrets (including the website password) masked."""

    def __init__(self, app: ASGIApp, *, log_headers: bool, max_body_bytes: int) -> None:
        self.app = app
        self.log_headers = log_headers
        self.max_body_bytes = max(0, max_body_bytes)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        req_headers: List[Tuple[bytes, bytes]] = list(scope.get("headers") or [])
        request_id = _header(req_headers, b"x-request-id") or uuid.uuid4().hex[:12]

        req_body = _BodyCapture(self.max_body_bytes)
        res_body = _BodyCapture(self.max_body_bytes)
        res_headers: List[Tuple[bytes, bytes]] = []
        res_status: Optional[int] = None

        async def receive_wrapped() -> Message:
            message = await receive()
            if message.get("type") == "http.request":
                req_body.feed(message.get("body") or b"")
            return message

        async def send_wrapped(message: Message) -> None:
            nonlocal res_status, res_headers
            if message.get("type") == "http.response.start":
                res_status = int(message.get("status") or 0)
                res_headers = list(message.get("headers") or [])
            elif message.get("type") == "http.response.body":
                res_body.feed(message.get("body") or b"")
            await send(message)

        err: Optional[BaseException] = None
        try:
            await self.app(scope, receive_wrapped, send_wrapped)
        except BaseException as e:  # noqa: BLE001 - log, then re-raise
            err = e
            raise
        finally:
            record: Dict[str, Any] = {
                "id": request_id,
                "method": str(scope.get("method") or "").upper(),
                "path": str(scope.get("path") or ""),
                "status": res_status,
                "dur_ms": int((time.perf_counter() - started_at) * 1000),
                "request": {
                    "body": _parse_body(_header(req_headers, b"content-type"), bytes(req_body.buf)),
                    "body_truncated": req_body.truncated,
                },
                "response": {
                    "body": _parse_body(_header(res_headers, b"content-type"), bytes(res_body.buf)),
                    "body_truncated": res_body.truncated,
                },
            }
            if self.log_headers:
                record["request"]["headers"] = _decode_headers(req_headers)
                record["response"]["headers"] = _decode_headers(res_headers)
            if err is not None:
                record["error"] = {"type": type(err).__name__, "message": str(err)}
            logger.info(json.dumps(record, ensure_ascii=False, separators=(",", ":"), default=str))


def install_http_logging(app: Any) -> None:
    """
    Enable request/response logging via env vars.

    - `MERCHANT_INTAKE_HTTP_LOG=1` enables middleware
    - `MERCHANT_INTAKE_HTTP_LOG_HEADERS=1` logs request/response headers (redacted)
    - `MERCHANT_INTAKE_HTTP_LOG_BODY_MAX_BYTES=4096` caps body bytes captured per request/response
    """
    if not env_bool("MERCHANT_INTAKE_HTTP_LOG", default=False):
        return
    log_headers = env_bool("MERCHANT_INTAKE_HTTP_LOG_HEADERS", default=False)
    max_body_bytes = env_int("MERCHANT_INTAKE_HTTP_LOG_BODY_MAX_BYTES", default=4096)
    app.add_middleware(HttpLoggingMiddleware, log_headers=log_headers, max_body_bytes=max_body_bytes)
