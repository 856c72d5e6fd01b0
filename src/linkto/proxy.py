"""Reverse-proxy aware origin resolution.

Works out what host and path prefix the *client* used, which differ
from what this server saw when a reverse proxy rewrites the request.
Forwarding headers are only honoured when the proxy is trusted;
otherwise any client could forge them.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass

from linkto.context import RequestContext
from linkto.http.headers import Headers
from linkto.http.request import Request

logger = logging.getLogger("linkto.proxy")


@dataclass(frozen=True, slots=True)
class ProxyResolver:
    """Builds a ``RequestContext`` from raw request values.

    Usage::

        resolver = ProxyResolver(trust_proxy=True)
        ctx = resolver.resolve(
            request.headers,
            route_base="/api",
            original_path="/api/items?page=2",
            protocol="https",
            query=request.query,
        )
    """

    trust_proxy: bool = False
    forwarded_host_header: str = "x-forwarded-host"
    forwarded_path_header: str = "x-forwarded-path"
    forwarded_proto_header: str = "x-forwarded-proto"

    def resolve(
        self,
        headers: Headers,
        *,
        route_base: str,
        original_path: str,
        protocol: str,
        query: Mapping[str, str],
        default_host: str | None = None,
    ) -> RequestContext:
        """Derive the effective origin and proxy base for one request.

        ``default_host`` stands in when the ``Host`` header is absent.
        Never raises: missing headers fall back to defaults.
        """
        host = headers.get("host") or default_host or ""
        proxy_base = ""

        if self.trust_proxy:
            host = headers.get_first_hop(self.forwarded_host_header) or host
            proxy_base = headers.get(self.forwarded_path_header) or ""
        elif self.forwarded_host_header in headers or self.forwarded_path_header in headers:
            logger.debug("Ignoring forwarding headers from untrusted proxy (host=%s)", host)

        context = RequestContext(
            protocol=protocol,
            host=host,
            proxy_base=proxy_base,
            original_path=original_path,
            route_base=route_base,
            query_params=query,
        )
        logger.debug(
            "Resolved link context %s (proxy_base=%r, route_base=%r)",
            context.href,
            proxy_base,
            route_base,
        )
        return context

    def determine_protocol(self, request: Request) -> str:
        """The scheme the client used.

        The ASGI scheme, overridden by ``X-Forwarded-Proto`` when the
        proxy is trusted.
        """
        if self.trust_proxy:
            forwarded = request.headers.get_first_hop(self.forwarded_proto_header)
            if forwarded:
                return forwarded.lower()
        return request.scheme

    def resolve_request(self, request: Request, *, route_base: str | None = None) -> RequestContext:
        """Resolve a ``RequestContext`` straight from an ASGI request.

        ``route_base`` defaults to the request's ASGI ``root_path``.
        """
        return self.resolve(
            request.headers,
            route_base=request.root_path if route_base is None else route_base,
            original_path=request.url,
            protocol=self.determine_protocol(request),
            query=request.query,
            default_host=request.server_host,
        )


def resolve(
    headers: Headers,
    *,
    trust_proxy: bool,
    route_base: str,
    original_path: str,
    protocol: str,
    query: Mapping[str, str],
) -> RequestContext:
    """Resolve with the default forwarding header names."""
    return ProxyResolver(trust_proxy=trust_proxy).resolve(
        headers,
        route_base=route_base,
        original_path=original_path,
        protocol=protocol,
        query=query,
    )
