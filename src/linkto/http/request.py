"""Immutable HTTP request snapshot.

Frozen metadata read from an ASGI scope. The link resolver only needs
received data that doesn't change, so the body is never touched.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from linkto.http.headers import Headers
from linkto.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    ``path`` is the decoded path from the scope; ``raw_path`` is the
    path exactly as received (percent-encoding intact). ``root_path``
    is the ASGI mount prefix of the application handling the request.
    """

    method: str
    scheme: str
    path: str
    raw_path: str
    root_path: str
    headers: Headers
    query: QueryParams
    http_version: str = "1.1"
    server: tuple[str, int | None] | None = None
    client: tuple[str, int] | None = None

    @property
    def url(self) -> str:
        """Path and query as received (``/foo/bar?one=1``)."""
        qs = self.query.raw
        if qs:
            return f"{self.raw_path}?{qs}"
        return self.raw_path

    @property
    def server_host(self) -> str | None:
        """``host[:port]`` from the ASGI ``server`` tuple.

        The port is omitted when it is the default for the scheme.
        """
        if self.server is None:
            return None
        host, port = self.server
        if port is None or (self.scheme, port) in (("http", 80), ("https", 443)):
            return host
        return f"{host}:{port}"

    @classmethod
    def from_asgi(cls, scope: Mapping[str, Any]) -> Request:
        """Create a Request from an ASGI HTTP scope."""
        server = scope.get("server")
        client = scope.get("client")
        raw_path = scope.get("raw_path")
        path = scope.get("path", "/")
        return cls(
            method=scope.get("method", "GET"),
            scheme=scope.get("scheme", "http"),
            path=path,
            raw_path=raw_path.decode("latin-1").split("?", 1)[0] if raw_path else path,
            root_path=scope.get("root_path", ""),
            headers=Headers(scope.get("headers", ())),
            query=QueryParams(scope.get("query_string", b"")),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
        )
