# Structured JSON logging for the payout service.
# Engine modules log named events (payout.processed, ledger.aggregated, ...)
# with their fields passed as `extra`; the middleware adds one
# request.completed line per HTTP request, keyed by X-Request-ID.

from __future__ import annotations

import json
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from time import monotonic
from typing import Any
from uuid import uuid4

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from tapify.core.config import settings
from tapify.core.security import decode_access_token


REQUEST_ID_HEADER = "X-Request-ID"
ERROR_CODE_HEADER = "X-Error-Code"

# Attributes every LogRecord carries; anything else came in through `extra`.
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}

# Request fields are emitted even when empty so log queries can rely on them.
_REQUEST_FIELDS = frozenset(
    {"request_id", "user_id", "route", "method", "status_code", "duration_ms", "error_code"}
)


def _json_default(value: Any) -> Any:
    # Money stays exact in logs.
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    return str(value)


class JsonLogFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in vars(record).items()
            if key not in _RECORD_ATTRS and (value is not None or key in _REQUEST_FIELDS)
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=True, default=_json_default)


def get_structured_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())
    logger.addHandler(handler)
    logger.setLevel(settings.LOG_LEVEL)
    logger.propagate = False
    return logger


logger = get_structured_logger("api_logger")


def _bearer_subject(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme != "Bearer" or not token:
        return None
    try:
        return decode_access_token(token).get("sub")
    except Exception:
        return None


def _request_fields(request: Request, request_id: str, start: float) -> dict[str, Any]:
    route = getattr(request.scope.get("route"), "path", None)
    return {
        "request_id": request_id,
        "user_id": _bearer_subject(request),
        "route": route or request.url.path,
        "path": request.url.path,
        "method": request.method,
        "duration_ms": round((monotonic() - start) * 1000.0, 2),
    }


class APILoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid4().hex
        request.state.request_id = request_id
        start = monotonic()
        try:
            response = await call_next(request)
        except Exception:
            fields = _request_fields(request, request_id, start)
            fields.update(status_code=500, error_code="unhandled_exception")
            logger.exception("request.failed", extra=fields)
            raise

        fields = _request_fields(request, request_id, start)
        fields.update(
            status_code=response.status_code,
            error_code=response.headers.get(ERROR_CODE_HEADER),
        )
        logger.info("request.completed", extra=fields)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
