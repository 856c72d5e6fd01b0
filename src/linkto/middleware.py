"""ASGI middleware that gives every request a bound ``link_to``.

For each HTTP request it resolves the client-facing origin once and
exposes a ``LinkBuilder`` over it in two places:

- ``scope["state"]["link_to"]`` (alias ``"linkto"``), which frameworks
  that honour ASGI state surface as ``request.state.link_to``;
- the ``link_context_var`` ContextVar, read by ``linkto.link_to()``
  and by the template globals.

Usage::

    app = LinkToMiddleware(app, LinkConfig(trust_proxy=True))
"""

import logging
from contextvars import Token

from linkto._internal.asgi import ASGIApp, Receive, Scope, Send
from linkto.builder import LinkBuilder
from linkto.config import LinkConfig
from linkto.context import link_context_var
from linkto.http.request import Request

logger = logging.getLogger("linkto.middleware")


class LinkToMiddleware:
    """Attach a per-request ``link_to`` to HTTP requests.

    Base options are validated here, at construction, so a bad config
    fails at startup rather than on the first request.
    """

    __slots__ = ("_base", "_resolver", "app", "config")

    def __init__(self, app: ASGIApp, config: LinkConfig | None = None) -> None:
        self.app = app
        self.config = config or LinkConfig()
        self._base = self.config.base_options()
        self._resolver = self.config.resolver()

    def builder_for(self, scope: Scope) -> LinkBuilder:
        """Build the ``LinkBuilder`` for one HTTP scope."""
        request = Request.from_asgi(scope)
        context = self._resolver.resolve_request(request, route_base=self.config.route_base)
        return LinkBuilder(context, self._base)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        builder = self.builder_for(scope)
        logger.debug("link_to bound for %s %s", scope.get("method", "GET"), builder.context.href)

        # Copy scope and state: the caller's dicts stay as they were.
        scope = dict(scope)
        scope["state"] = {
            **scope.get("state", {}),
            "link_to": builder.link_to,
            "linkto": builder.link_to,
        }

        token: Token[LinkBuilder] = link_context_var.set(builder)
        try:
            await self.app(scope, receive, send)
        finally:
            link_context_var.reset(token)
