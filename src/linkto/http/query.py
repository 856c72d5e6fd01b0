"""Query string parsing and form encoding.

``QueryParams`` is the immutable view of the incoming request's query.
``parse_query`` and ``encode_query`` handle the explicit query segment
of a link target and the serialized query of a built link.
"""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qs, parse_qsl, urlencode


class QueryParams(Mapping[str, str]):
    """Immutable query string parameters.

    Attributes:
        _data: Parsed query string as field name -> list of values.
        _raw: Raw query string bytes.

    ``__getitem__`` returns the last value for a key, so a repeated
    key behaves as if later occurrences overwrite earlier ones.
    ``get_list`` returns every value. Iteration follows the order in
    which keys first appear in the query string.
    """

    _data: dict[str, list[str]]
    _raw: bytes

    __slots__ = ("_data", "_raw")

    def __init__(self, query_string: bytes = b"") -> None:
        object.__setattr__(self, "_raw", query_string)
        parsed = parse_qs(query_string.decode("latin-1"), keep_blank_values=True)
        object.__setattr__(self, "_data", parsed)

    def __getitem__(self, key: str) -> str:
        return self._data[key][-1]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"QueryParams({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the last value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[-1]
        return default

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*."""
        return list(self._data.get(key, []))

    @property
    def raw(self) -> str:
        """The undecoded query string, without the leading ``?``."""
        return self._raw.decode("latin-1")


def parse_query(text: str) -> dict[str, str]:
    """Parse a form-encoded query segment into a last-wins dict.

    Blank values are kept (``flag=`` -> ``{"flag": ""}``).
    """
    return dict(parse_qsl(text, keep_blank_values=True))


def encode_query(params: Mapping[str, str]) -> str:
    """Form-encode *params* in iteration order (``a=1&b=two+words``)."""
    return urlencode(list(params.items()))
