import json
import logging
import os
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, Optional

REQUEST_ID_HEADER = "x-request-id"
request_id_ctx_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

# Attributes passed through ``extra=`` that the JSON formatter copies out
EXTRA_FIELDS = (
    "path",
    "method",
    "status_code",
    "latency_ms",
    "category",
    "severity",
    "confidence",
    "training_records",
)


def get_request_id() -> Optional[str]:
    return request_id_ctx_var.get()


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        log: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "time": int(record.created * 1000),
        }
        rid = get_request_id()
        if rid:
            log["request_id"] = rid
        if record.exc_info:
            log["exc_info"] = self.formatException(record.exc_info)
        for key in EXTRA_FIELDS:
            if hasattr(record, key):
                log[key] = getattr(record, key)
        return json.dumps(log, ensure_ascii=False, default=str)


def _truthy(value: str) -> bool:
    return value.lower() in {"1", "true", "yes", "on"}


def configure_logging(level: Optional[str] = None, structured: Optional[bool] = None):
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if structured is None:
        structured = _truthy(os.getenv("STRUCTURED_LOGS", "true"))
    root = logging.getLogger()
    for h in list(root.handlers):
        root.removeHandler(h)
    handler = logging.StreamHandler(sys.stdout)
    if structured:
        handler.setFormatter(JsonLogFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    root.addHandler(handler)
    root.setLevel(level)
    logging.getLogger("uvicorn.access").handlers = []


class RequestIDMiddleware:
    """Tag every request with an id (incoming header or fresh uuid4) and log its outcome."""

    def __init__(self, app):
        self.app = app

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        headers = {k.decode().lower(): v.decode() for k, v in scope.get("headers", [])}
        rid = headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        token = request_id_ctx_var.set(rid)
        start = time.perf_counter()

        async def send_wrapper(message):
            if message.get("type") == "http.response.start":
                message.setdefault("headers", []).append((REQUEST_ID_HEADER.encode(), rid.encode()))
                logging.getLogger("request").info(
                    "request completed",
                    extra={
                        "path": scope.get("path"),
                        "method": scope.get("method"),
                        "status_code": message.get("status"),
                        "latency_ms": round((time.perf_counter() - start) * 1000, 2),
                    },
                )
            await send(message)
        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            request_id_ctx_var.reset(token)


class MaxBodySizeMiddleware:
    """Reject request bodies above ``max_bytes`` with a 413 before they reach the app.

    Work-log histories can be posted inline, so the limit is configurable.
    """

    def __init__(self, app, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def _reject(self, send):
        body = json.dumps({
            "detail": f"Request body exceeds {self.max_bytes} bytes",
            "code": "HTTP_413",
            "request_id": get_request_id(),
        }).encode()
        await send({
            "type": "http.response.start",
            "status": 413,
            "headers": [(b"content-type", b"application/json")],
        })
        await send({"type": "http.response.body", "body": body})

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return
        total = 0
        chunks = []
        more_body = True
        while more_body:
            message = await receive()
            if message["type"] != "http.request":
                # client went away mid-body; let the app see the disconnect
                async def disconnected():
                    return message

                await self.app(scope, disconnected, send)
                return
            chunk = message.get("body", b"")
            total += len(chunk)
            if total > self.max_bytes:
                await self._reject(send)
                return
            chunks.append(chunk)
            more_body = message.get("more_body", False)
        body = b"".join(chunks)

        async def replay():
            return {"type": "http.request", "body": body, "more_body": False}

        await self.app(scope, replay, send)
