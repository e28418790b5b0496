"""HTTP worker that answers action requests."""

from __future__ import annotations

import json
import logging
import math
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable, Mapping, NamedTuple, Optional
from urllib.parse import urlsplit

from junoindex.action_metrics import ActionMetrics
from junoindex.action_types import ActionContext, GraphQLError, Payload

log = logging.getLogger(__name__)

ActionHandler = Callable[[ActionContext, Payload], Any]

_JSON = "application/json"
_TEXT = "text/plain; charset=utf-8"
_INVALID_PAYLOAD = b"invalid payload: failed to unmarshal json\n"
_NOT_FOUND = b"404 page not found\n"


class _Reply(NamedTuple):
    status: int
    content_type: str
    body: bytes


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Mapping):
        return {str(key): _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(item) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"json: unsupported value: {value!r}")
    if value is None or isinstance(value, (str, int, float)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"json: unsupported type: {type(value).__name__}")


def _marshal(value: Any) -> bytes:
    text = json.dumps(
        _to_jsonable(value), separators=(",", ":"), ensure_ascii=False, allow_nan=False
    )
    for char, escaped in (
        ("<", "\\u003c"),
        (">", "\\u003e"),
        ("&", "\\u0026"),
        ("\u2028", "\\u2028"),
        ("\u2029", "\\u2029"),
    ):
        text = text.replace(char, escaped)
    return text.encode()


class ActionsWorker:
    """Routes action requests to their handlers."""

    def __init__(self, context: ActionContext, metrics: Optional[ActionMetrics] = None) -> None:
        self.context = context
        self.metrics = metrics if metrics is not None else ActionMetrics()
        self._handlers: dict[str, ActionHandler] = {}

    def register_handler(self, path: str, handler: ActionHandler) -> None:
        """Use the handler for every request made to the given path."""
        if not path:
            raise ValueError("invalid action path")
        if path in self._handlers:
            raise ValueError(f"multiple registrations for {path}")
        log.debug("registering actions handler for %s", path)
        self._handlers[path] = handler

    def handle(self, path: str, body: bytes) -> _Reply:
        """Answer a request made to the given path with the given body."""
        handler = self._handlers.get(path)
        if handler is None:
            return _Reply(404, _TEXT, _NOT_FOUND)

        start = self.metrics.clock()
        try:
            payload = Payload.from_json(body)
        except ValueError:
            return _Reply(500, _TEXT, _INVALID_PAYLOAD)

        try:
            data = _marshal(handler(self.context, payload))
        except Exception as exc:
            self.metrics.error(path)
            return self._error_reply(path, exc)

        self.metrics.success(path)
        self.metrics.observe_response_time(path, start)
        return _Reply(200, _JSON, data)

    def _error_reply(self, path: str, exc: Exception) -> _Reply:
        log.error("error while executing action %s: %s", path, exc)
        return _Reply(400, _JSON, _marshal(GraphQLError(message=str(exc))))

    def _make_server(self, port: int) -> ThreadingHTTPServer:
        if not 0 <= port <= 65535:
            raise ValueError(f"invalid port: {port}")
        worker = self

        class _RequestHandler(BaseHTTPRequestHandler):
            def _dispatch(self) -> None:
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length) if length > 0 else b""
                reply = worker.handle(urlsplit(self.path).path, body)
                self.send_response(reply.status)
                self.send_header("Content-Type", reply.content_type)
                self.send_header("Content-Length", str(len(reply.body)))
                self.end_headers()
                self.wfile.write(reply.body)

            do_GET = do_POST = do_PUT = do_PATCH = do_DELETE = _dispatch

            def log_message(self, format: str, *args: Any) -> None:
                log.debug(format, *args)

        return ThreadingHTTPServer(("", port), _RequestHandler)

    def start(self, port: int) -> None:
        """Serve action requests on the given port until interrupted."""
        with self._make_server(port) as server:
            server.serve_forever()