"""Tests for linkto.proxy — trusted and untrusted forwarding headers."""

import logging

import pytest

from linkto.builder import LinkBuilder
from linkto.errors import UrlResolutionError
from linkto.http.headers import Headers
from linkto.http.request import Request
from linkto.proxy import ProxyResolver, resolve

FORWARDED = {
    "Host": "example.com",
    "X-Forwarded-Host": "forward.example.com",
    "X-Forwarded-Path": "/all/your/base",
    "X-Forwarded-Proto": "https",
}


def _resolve(headers: dict[str, str], *, trust_proxy: bool, **overrides: object):
    kwargs: dict[str, object] = {
        "route_base": "",
        "original_path": "/foo/bar/baz",
        "protocol": "http",
        "query": {},
    }
    kwargs.update(overrides)
    return resolve(Headers.from_dict(headers), trust_proxy=trust_proxy, **kwargs)  # type: ignore[arg-type]


class TestUntrusted:
    def test_forwarded_headers_ignored(self) -> None:
        ctx = _resolve(FORWARDED, trust_proxy=False)

        assert ctx.host == "example.com"
        assert ctx.proxy_base == ""
        assert ctx.href == "http://example.com/foo/bar/baz"

    def test_ignored_headers_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.DEBUG, logger="linkto.proxy"):
            _resolve(FORWARDED, trust_proxy=False)
        assert "untrusted proxy" in caplog.text


class TestTrusted:
    def test_forwarded_host_preferred(self) -> None:
        ctx = _resolve(
            {"Host": "example.com", "X-Forwarded-Host": "www.example.com"},
            trust_proxy=True,
        )
        assert ctx.host == "www.example.com"

    def test_empty_forwarded_host_falls_back(self) -> None:
        ctx = _resolve({"Host": "example.com", "X-Forwarded-Host": ""}, trust_proxy=True)
        assert ctx.host == "example.com"

    def test_forwarded_host_chain_uses_first_entry(self) -> None:
        ctx = _resolve(
            {"Host": "internal", "X-Forwarded-Host": "www.example.com, edge.lan"},
            trust_proxy=True,
        )
        assert ctx.host == "www.example.com"

    def test_blank_leading_hop_skipped(self) -> None:
        ctx = _resolve(
            {"Host": "internal", "X-Forwarded-Host": " , www.example.com, edge.lan"},
            trust_proxy=True,
        )
        assert ctx.host == "www.example.com"

    def test_unrooted_forwarded_path_kept_but_unbuildable(self) -> None:
        ctx = _resolve({"Host": "example.com", "X-Forwarded-Path": "basepath"}, trust_proxy=True)

        assert ctx.proxy_base == "basepath"
        with pytest.raises(UrlResolutionError, match="invalid proxy base"):
            LinkBuilder(ctx).link_to("/base")

    def test_forwarded_path_becomes_proxy_base(self) -> None:
        ctx = _resolve({"Host": "example.com", "X-Forwarded-Path": "/basepath"}, trust_proxy=True)

        assert ctx.proxy_base == "/basepath"
        assert ctx.href == "http://example.com/basepath/foo/bar/baz"

    def test_no_forwarding_headers(self) -> None:
        ctx = _resolve({"Host": "example.com"}, trust_proxy=True)

        assert ctx.host == "example.com"
        assert ctx.proxy_base == ""

    def test_header_lookup_case_insensitive(self) -> None:
        ctx = _resolve(
            {"HOST": "example.com", "x-FORWARDED-path": "/p"},
            trust_proxy=True,
        )
        assert ctx.host == "example.com"
        assert ctx.proxy_base == "/p"

    def test_custom_header_names(self) -> None:
        resolver = ProxyResolver(trust_proxy=True, forwarded_path_header="x-forwarded-prefix")
        ctx = resolver.resolve(
            Headers.from_dict({"Host": "example.com", "X-Forwarded-Prefix": "/api"}),
            route_base="",
            original_path="/",
            protocol="http",
            query={},
        )
        assert ctx.proxy_base == "/api"


class TestPassThrough:
    def test_protocol_route_base_and_query(self) -> None:
        ctx = _resolve(
            {"Host": "example.com"},
            trust_proxy=True,
            protocol="https",
            route_base="/foo",
            query={"one": "1"},
        )

        assert ctx.protocol == "https"
        assert ctx.route_base == "/foo"
        assert dict(ctx.query_params) == {"one": "1"}

    def test_missing_host_is_empty(self) -> None:
        assert _resolve({}, trust_proxy=False).host == ""


def _request(headers: dict[str, str], **scope: object) -> Request:
    base: dict[str, object] = {
        "type": "http",
        "method": "GET",
        "scheme": "http",
        "path": "/foo/bar/baz",
        "raw_path": b"/foo/bar/baz",
        "query_string": b"one=1",
        "root_path": "",
        "headers": Headers.from_dict(headers).raw,
        "server": ("testserver", 80),
    }
    base.update(scope)
    return Request.from_asgi(base)


class TestDetermineProtocol:
    def test_scheme_when_untrusted(self) -> None:
        req = _request({"X-Forwarded-Proto": "https"})
        assert ProxyResolver(trust_proxy=False).determine_protocol(req) == "http"

    def test_forwarded_proto_when_trusted(self) -> None:
        req = _request({"X-Forwarded-Proto": "HTTPS, http"})
        assert ProxyResolver(trust_proxy=True).determine_protocol(req) == "https"

    def test_scheme_when_trusted_without_header(self) -> None:
        req = _request({}, scheme="https")
        assert ProxyResolver(trust_proxy=True).determine_protocol(req) == "https"


class TestResolveRequest:
    def test_from_request(self) -> None:
        req = _request({"Host": "example.com"}, root_path="/foo")
        ctx = ProxyResolver().resolve_request(req)

        assert ctx.href == "http://example.com/foo/bar/baz?one=1"
        assert ctx.route_base == "/foo"
        assert dict(ctx.query_params) == {"one": "1"}

    def test_route_base_override(self) -> None:
        req = _request({"Host": "example.com"}, root_path="/foo")
        assert ProxyResolver().resolve_request(req, route_base="/foo/bar").route_base == "/foo/bar"

    def test_server_stands_in_for_missing_host(self) -> None:
        req = _request({}, server=("localhost", 8000))
        assert ProxyResolver().resolve_request(req).host == "localhost:8000"
