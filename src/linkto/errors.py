"""linkto exception hierarchy.

Shared across the resolver, builder, middleware, and templating so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class LinkToError(Exception):
    """Base for all linkto-specific errors."""


class InvalidConfiguration(LinkToError, ValueError):
    """Raised when link options are invalid.

    Covers an unrecognized ``absolute`` mode or a malformed ``params``
    policy, whether given at setup time (``LinkConfig``) or per call.
    """


@dataclass(frozen=True, slots=True)
class UrlResolutionError(LinkToError, ValueError):
    """The request origin or target cannot form a well-formed URL.

    Raised by the link builder instead of returning a corrupt string,
    e.g. when the effective host is empty or carries an invalid port.
    """

    url: str
    detail: str = ""

    def __str__(self) -> str:
        if self.detail:
            return f"cannot build link from {self.url!r}: {self.detail}"
        return f"cannot build link from {self.url!r}"
