"""Tests for linkto.testing.response — Response, Redirect, send_response."""

from linkto.testing.response import Redirect, Response, send_response


class TestResponse:
    def test_with_header_returns_new(self) -> None:
        original = Response("hi")
        changed = original.with_header("X-There", "http://example.com/there")

        assert original.headers == ()
        assert changed.header("x-there") == "http://example.com/there"

    def test_with_headers_and_status(self) -> None:
        r = Response().with_headers({"A": "1", "B": "2"}).with_status(201)
        assert r.status == 201
        assert r.header("a") == "1"
        assert r.header("missing", "nope") == "nope"

    def test_text_and_bytes(self) -> None:
        assert Response("héllo").body_bytes == "héllo".encode()
        assert Response(b"raw").text == "raw"


class TestRedirect:
    def test_location(self) -> None:
        r = Redirect("http://example.com/foo/bar/quux", status=303)
        assert r.status == 303
        assert r.location == "http://example.com/foo/bar/quux"

    def test_default_status(self) -> None:
        assert Redirect("/x").status == 302


class TestSendResponse:
    async def test_messages(self) -> None:
        sent: list[dict[str, object]] = []

        async def send(message: dict[str, object]) -> None:
            sent.append(message)

        await send_response(Response("ok").with_header("X-Base", "http://e/base"), send)

        start, body = sent
        assert start["type"] == "http.response.start"
        assert start["status"] == 200
        assert (b"x-base", b"http://e/base") in start["headers"]
        assert (b"content-length", b"2") in start["headers"]
        assert body == {"type": "http.response.body", "body": b"ok"}

    async def test_body_suppressed_for_304(self) -> None:
        sent: list[dict[str, object]] = []

        async def send(message: dict[str, object]) -> None:
            sent.append(message)

        await send_response(Response("ignored", status=304), send)
        assert sent[1]["body"] == b""
