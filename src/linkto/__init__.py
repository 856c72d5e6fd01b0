"""linkto — client-facing absolute links from inside a request handler.

Builds redirect and hypermedia URLs that stay correct behind a reverse
proxy that rewrites the host or adds a path prefix, and optionally
carries the current request's query parameters forward.

Basic usage::

    from linkto import LinkConfig, LinkToMiddleware

    app = LinkToMiddleware(asgi_app, LinkConfig(trust_proxy=True))

    # inside a handler, for GET /foo/bar/baz?one=1
    link_to = scope["state"]["link_to"]
    link_to("quux")       # http://example.com/foo/bar/quux
    link_to("../back")    # http://example.com/foo/back
    link_to("/base")      # http://example.com/base

Without a framework::

    from linkto import LinkBuilder, RequestContext

    ctx = RequestContext(protocol="https", host="example.com", original_path="/a/b")
    LinkBuilder(ctx).link_to("c")   # https://example.com/a/c
"""

__version__ = "0.1.0"
__all__ = [
    "AbsoluteMode",
    "AllParams",
    "AllowList",
    "InvalidConfiguration",
    "LinkBuilder",
    "LinkConfig",
    "LinkOptions",
    "LinkToError",
    "LinkToMiddleware",
    "NoParams",
    "Predicate",
    "ProxyResolver",
    "RequestContext",
    "UrlResolutionError",
    "build_link",
    "get_link_builder",
    "link_to",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import linkto`` fast while providing a clean top-level API.
    """
    if name in ("LinkBuilder", "build_link"):
        from linkto import builder as _builder

        return getattr(_builder, name)

    if name == "LinkConfig":
        from linkto.config import LinkConfig

        return LinkConfig

    if name == "LinkToMiddleware":
        from linkto.middleware import LinkToMiddleware

        return LinkToMiddleware

    if name in ("AbsoluteMode", "AllParams", "AllowList", "LinkOptions", "NoParams", "Predicate"):
        from linkto import options as _options

        return getattr(_options, name)

    if name == "ProxyResolver":
        from linkto.proxy import ProxyResolver

        return ProxyResolver

    if name in ("RequestContext", "get_link_builder", "link_to"):
        from linkto import context as _ctx

        return getattr(_ctx, name)

    if name in ("InvalidConfiguration", "LinkToError", "UrlResolutionError"):
        from linkto import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
