"""A small WSGI router with route groups, path parameters, logging and crash recovery."""

from __future__ import annotations

import json
import logging
import posixpath
import time
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Callable
from urllib.parse import parse_qs
from wsgiref.simple_server import make_server

log = logging.getLogger(__name__)

_TEXT = "text/plain; charset=utf-8"
_JSON = "application/json; charset=utf-8"


@dataclass(frozen=True)
class _Request:
    """What a handler receives about the incoming request."""

    method: str
    path: str
    params: dict[str, str]
    query: dict[str, list[str]]
    body: bytes
    environ: dict[str, Any] = field(repr=False, compare=False)

    def json(self) -> Any:
        """Decode the body as JSON; an empty body gives None."""
        return json.loads(self.body) if self.body else None


Handler = Callable[[_Request], Any]


@dataclass(frozen=True)
class _Route:
    method: str
    segments: tuple[str, ...]
    handler: Handler

    @property
    def rank(self) -> tuple[int, ...]:
        return tuple(2 if s.startswith("*") else 1 if s.startswith(":") else 0 for s in self.segments)

    @property
    def shape(self) -> tuple[str, ...]:
        return tuple(s[0] if s[:1] in (":", "*") else s for s in self.segments)

    def match(self, parts: list[str]) -> dict[str, str] | None:
        params: dict[str, str] = {}
        for position, segment in enumerate(self.segments):
            if segment.startswith("*"):
                if position >= len(parts):
                    return None
                params[segment[1:]] = "/" + "/".join(parts[position:])
                return params
            if position >= len(parts):
                return None
            part = parts[position]
            if segment.startswith(":"):
                if not part:
                    return None
                params[segment[1:]] = part
            elif segment != part:
                return None
        return params if len(parts) == len(self.segments) else None


def _split(path: str) -> list[str]:
    return [] if path == "/" else path[1:].split("/")


def _join(base: str, relative: str) -> str:
    if not relative:
        return base
    joined = posixpath.normpath(base.rstrip("/") + "/" + relative.lstrip("/"))
    if relative.endswith("/") and not joined.endswith("/"):
        joined += "/"
    return joined


def _status_line(code: int) -> str:
    try:
        phrase = HTTPStatus(code).phrase
    except ValueError:
        phrase = "Unknown"
    return f"{code} {phrase}"


def _unpack(result: Any) -> tuple[int, Any]:
    if isinstance(result, tuple) and len(result) == 2 and isinstance(result[0], int):
        return result
    return HTTPStatus.OK, result


def _encode(payload: Any) -> tuple[list[tuple[str, str]], bytes]:
    if payload is None:
        return [], b""
    if isinstance(payload, bytes):
        return [("Content-Type", "application/octet-stream")], payload
    if isinstance(payload, str):
        return [("Content-Type", _TEXT)], payload.encode("utf-8")
    return [("Content-Type", _JSON)], json.dumps(payload).encode("utf-8")


def _read_body(environ: dict[str, Any]) -> bytes:
    try:
        length = int(environ.get("CONTENT_LENGTH") or 0)
    except ValueError:
        length = 0
    stream = environ.get("wsgi.input")
    return stream.read(length) if length > 0 and stream is not None else b""


def _parse_addr(addr: str) -> tuple[str, int]:
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit() or int(port) > 65535:
        raise ValueError(f"invalid listen address {addr!r}")
    return host.strip("[]"), int(port)


class RouteGroup:
    """Routes sharing a path prefix."""

    def __init__(self, router: Router, prefix: str) -> None:
        self.router = router
        self.prefix = prefix

    def group(self, prefix: str) -> RouteGroup:
        return RouteGroup(self.router, _join(self.prefix, prefix))

    def _add(self, method: str, path: str, handler: Handler) -> None:
        self.router.add_route(method, _join(self.prefix, path), handler)

    def get(self, path: str, handler: Handler) -> None:
        self._add("GET", path, handler)

    def post(self, path: str, handler: Handler) -> None:
        self._add("POST", path, handler)

    def put(self, path: str, handler: Handler) -> None:
        self._add("PUT", path, handler)

    def delete(self, path: str, handler: Handler) -> None:
        self._add("DELETE", path, handler)


class Router:
    """A WSGI application dispatching on method and path.

    Paths may hold ``:name`` segments and a final ``*name`` catch-all.
    Handlers take the request and return a payload or ``(status, payload)``;
    dicts and lists are sent as JSON, str as text, bytes as they are.
    Unhandled exceptions become empty 500 responses.
    """

    def __init__(self) -> None:
        self._routes: list[_Route] = []

    def group(self, prefix: str) -> RouteGroup:
        return RouteGroup(self, _join("/", prefix))

    def add_route(self, method: str, path: str, handler: Handler) -> None:
        """Register ``handler``; raises ValueError on a malformed or duplicate path."""
        if not path.startswith("/"):
            raise ValueError(f"path must begin with '/': {path!r}")
        route = _Route(method.upper(), tuple(_split(path)), handler)
        if any(s.startswith("*") for s in route.segments[:-1]):
            raise ValueError(f"catch-all must be the last segment: {path!r}")
        if any(s in (":", "*") for s in route.segments):
            raise ValueError(f"path parameters need a name: {path!r}")
        if any(r.method == route.method and r.shape == route.shape for r in self._routes):
            raise ValueError(f"route {route.method} {path} is already registered")
        self._routes.append(route)

    def register_routes(self, register: Callable[[Router], None]) -> None:
        register(self)

    def register_group_routes(self, prefix: str, register: Callable[[RouteGroup], None]) -> None:
        register(self.group(prefix))

    def _resolve(self, method: str, path: str) -> tuple[_Route, dict[str, str]] | None:
        parts = _split(path)
        candidates = [
            (route, params)
            for route in self._routes
            if route.method == method and (params := route.match(parts)) is not None
        ]
        return min(candidates, key=lambda c: c[0].rank, default=None)

    def _dispatch(
        self, method: str, path: str, environ: dict[str, Any]
    ) -> tuple[int, list[tuple[str, str]], bytes]:
        found = self._resolve(method, path)
        if found is None:
            alternative = path[:-1] if path.endswith("/") and path != "/" else path + "/"
            if self._resolve(method, alternative) is not None:
                query = environ.get("QUERY_STRING")
                location = f"{alternative}?{query}" if query else alternative
                code = HTTPStatus.MOVED_PERMANENTLY if method == "GET" else HTTPStatus.TEMPORARY_REDIRECT
                return code, [("Location", location)], b""
            return HTTPStatus.NOT_FOUND, [("Content-Type", _TEXT)], b"404 page not found"

        route, params = found
        try:
            request = _Request(
                method=method,
                path=path,
                params=params,
                query=parse_qs(environ.get("QUERY_STRING", ""), keep_blank_values=True),
                body=_read_body(environ),
                environ=environ,
            )
            status, payload = _unpack(route.handler(request))
            headers, body = _encode(payload)
            return int(status), headers, body
        except Exception:
            log.exception("Recovered from error handling %s %s", method, path)
            return HTTPStatus.INTERNAL_SERVER_ERROR, [], b""

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> list[bytes]:
        started = time.perf_counter()
        method = environ.get("REQUEST_METHOD", "GET").upper()
        path = environ.get("PATH_INFO") or "/"
        status, headers, body = self._dispatch(method, path, environ)
        headers = [*headers, ("Content-Length", str(len(body)))]
        start_response(_status_line(status), headers)
        log.info(
            "%3d | %10.3fms | %15s | %-7s %s",
            status,
            (time.perf_counter() - started) * 1000,
            environ.get("REMOTE_ADDR", ""),
            method,
            path,
        )
        return [body]

    def start(self, addr: str = ":8080") -> None:
        """Serve on ``host:port`` until interrupted."""
        host, port = _parse_addr(addr)
        with make_server(host, port, self) as server:
            log.info("Listening and serving HTTP on %s", addr)
            server.serve_forever()