"""Per-request link context.

Provides:
- ``RequestContext``: the frozen snapshot every link is computed from.
- ``link_context_var``: the ``LinkBuilder`` for the current task/thread.
- ``link_to()``: build a link against the current request from anywhere.

The middleware sets the ContextVar before dispatch and resets it after
each request. If nothing sets it, ``get_link_builder`` raises
``LookupError``.

Thread safety:
    ``RequestContext`` is never mutated after construction, and
    ``ContextVar`` is task-local under asyncio and thread-local under
    threads. No locks needed.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from linkto.builder import LinkBuilder


@dataclass(frozen=True, slots=True)
class RequestContext:
    """What the client sees of the current request.

    Attributes:
        protocol: ``"http"`` or ``"https"`` as the client used it.
        host: ``host[:port]`` as the client addressed it.
        proxy_base: Path prefix added by a reverse proxy, ``""`` if none.
        original_path: Path and query as received by this server.
        route_base: Path prefix at which the current route is mounted.
        query_params: Incoming query, one (last) value per key.
    """

    protocol: str
    host: str
    proxy_base: str = ""
    original_path: str = "/"
    route_base: str = ""
    query_params: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Snapshot as a read-only view.
        object.__setattr__(self, "query_params", MappingProxyType(dict(self.query_params)))

    @property
    def href(self) -> str:
        """The current request's full URL from the client's point of view."""
        return f"{self.protocol}://{self.host}{self.proxy_base}{self.original_path}"


# -- Active builder --

link_context_var: ContextVar[LinkBuilder] = ContextVar("linkto_builder")
"""The link builder for the current request. Set by the middleware."""


def get_link_builder() -> LinkBuilder:
    """Return the current request's link builder.

    Raises ``LookupError`` if called outside a request context.
    """
    return link_context_var.get()


def link_to(path: str, **options: Any) -> str:
    """Build a link for *path* against the current request.

    Accepts the same keyword options as ``LinkBuilder.link_to``.
    """
    return link_context_var.get().link_to(path, **options)
