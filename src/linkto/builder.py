"""Absolute link construction for a single request.

``build_link`` turns a target path into an absolute URL for the client:

1. ``/``-rooted targets get a prefix chosen by the absolute mode
   (nothing, the proxy base, or the proxy base plus route base).
2. The target's own query string is split off as explicit parameters.
3. Incoming query parameters are selected by the params policy, and
   explicit parameters override them.
4. The path is resolved against the current request's full URL with
   RFC 3986 reference resolution (``urljoin``), so ``there`` becomes a
   sibling of the current path and ``../back`` climbs one segment.
5. The merged parameters are form-encoded back on.

Everything here is pure: the same context, path and options always
give the same URL, and nothing is mutated.
"""

import re
from urllib.parse import urljoin, urlsplit

from linkto.context import RequestContext
from linkto.errors import UrlResolutionError
from linkto.http.query import encode_query, parse_query
from linkto.options import AbsoluteMode, LinkOptions

_SCHEME = re.compile(r"[A-Za-z][A-Za-z0-9+.\-]*")
_BAD_HOST_CHARS = frozenset("/?#@\\ \t\r\n")
_BAD_PATH_CHARS = frozenset("?#\\ \t\r\n")


def _origin_error(context: RequestContext) -> str | None:
    """Describe what's wrong with the context's origin, if anything."""
    if not _SCHEME.fullmatch(context.protocol):
        return f"invalid protocol {context.protocol!r}"
    if not context.host:
        return "empty host"
    if any(char in _BAD_HOST_CHARS for char in context.host):
        return f"invalid host {context.host!r}"
    try:
        urlsplit(f"{context.protocol}://{context.host}/").port  # noqa: B018, raises on a bad port
    except ValueError as exc:
        return f"invalid host {context.host!r} ({exc})"
    if context.proxy_base and (
        not context.proxy_base.startswith("/")
        or context.proxy_base.startswith("//")
        or any(char in _BAD_PATH_CHARS for char in context.proxy_base)
    ):
        return f"invalid proxy base {context.proxy_base!r}"
    return None


def _prefix(context: RequestContext, mode: AbsoluteMode) -> str:
    match mode:
        case AbsoluteMode.HOST:
            return ""
        case AbsoluteMode.PROXY:
            return context.proxy_base
        case AbsoluteMode.ROUTE:
            return context.proxy_base + context.route_base


def build_link(context: RequestContext, path: str, options: LinkOptions | None = None) -> str:
    """Build the absolute URL for *path* as seen from the current request.

    Args:
        context: The current request's resolved snapshot.
        path: Target path, ``/``-rooted or relative, optionally with
            ``?query`` and ``#fragment``.
        options: Fully merged options; unset fields take the defaults.

    Raises:
        InvalidConfiguration: If *options* hold an unknown mode or policy.
        UrlResolutionError: If the origin can't form a valid URL.
    """
    absolute, policy = (options or LinkOptions()).resolved()

    problem = _origin_error(context)
    if problem is not None:
        raise UrlResolutionError(context.href, problem)

    if path.startswith("/"):
        path = _prefix(context, absolute) + path

    path, hash_mark, fragment = path.partition("#")
    path, question_mark, query_text = path.partition("?")
    explicit = parse_query(query_text) if question_mark else {}

    # Explicit keys keep their order; propagated keys follow unless overridden.
    merged = dict(explicit)
    for key, value in policy.select(context.query_params).items():
        merged.setdefault(key, value)

    try:
        url = urljoin(context.href, path)
        parts = urlsplit(url)
    except ValueError as exc:
        raise UrlResolutionError(context.href, str(exc)) from exc

    # The base URL's own query and fragment never survive resolution.
    url = parts._replace(query="", fragment="").geturl()
    query = encode_query(merged)
    if query:
        url = f"{url}?{query}"
    if hash_mark:
        url = f"{url}#{fragment}"
    return url


class LinkBuilder:
    """``link_to`` bound to one request.

    Holds the request's ``RequestContext`` and the base options fixed at
    setup time. Each call merges its own options over the base and
    builds independently; neither the context nor the base is touched.

    Usage::

        link_to = LinkBuilder(context, LinkOptions.of(params=["page"]))
        link_to("quux")                      # sibling of the current path
        link_to("/search?q=x", params=True)  # carry every incoming key
    """

    __slots__ = ("base", "context")

    def __init__(self, context: RequestContext, base: LinkOptions | None = None) -> None:
        self.context = context
        self.base = base or LinkOptions()

    def link_to(
        self,
        path: str,
        *,
        absolute: AbsoluteMode | str | None = None,
        params: object = None,
        options: LinkOptions | None = None,
    ) -> str:
        """Build the absolute URL for *path*.

        Per-call ``absolute``/``params`` (or a whole ``options`` layer)
        override the base options; omitted ones keep the base values.
        """
        effective = self.base.merge(options).merge(LinkOptions.of(absolute, params))
        return build_link(self.context, path, effective)

    linkto = link_to

    def __call__(self, path: str, **options: object) -> str:
        return self.link_to(path, **options)  # type: ignore[arg-type]

    def __repr__(self) -> str:
        return f"LinkBuilder({self.context.href!r})"
