"""Link options: absolute-path mode and query propagation policy.

Options come in two layers. Base options are fixed when the middleware
is configured; per-call options passed to ``link_to`` override them
field by field. A params policy is always replaced whole, never merged.

Policies are tagged variants, not a bag of loosely typed values::

    NoParams()                       # drop every incoming query key
    AllParams()                      # carry every incoming key forward
    AllowList(frozenset({"page"}))   # carry only the named keys
    Predicate(lambda k, v: k.startswith("utm_"))

The loose forms accepted at the API boundary (``True``, a list of names,
a function) are converted by ``coerce_params`` before anything else
sees them.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, TypeAlias

from linkto.errors import InvalidConfiguration


class AbsoluteMode(Enum):
    """Where a ``/``-rooted link target is anchored."""

    HOST = "host"  # the bare origin
    PROXY = "proxy"  # below the reverse-proxy prefix
    ROUTE = "route"  # below the proxy prefix plus the route mount


@dataclass(frozen=True, slots=True)
class NoParams:
    """Propagate nothing from the incoming query."""

    def select(self, query: Mapping[str, str]) -> dict[str, str]:
        return {}


@dataclass(frozen=True, slots=True)
class AllParams:
    """Propagate every incoming query parameter."""

    def select(self, query: Mapping[str, str]) -> dict[str, str]:
        return dict(query.items())


@dataclass(frozen=True, slots=True)
class AllowList:
    """Propagate only the named parameters that the request carries."""

    names: frozenset[str]

    def select(self, query: Mapping[str, str]) -> dict[str, str]:
        return {key: value for key, value in query.items() if key in self.names}


@dataclass(frozen=True, slots=True)
class Predicate:
    """Propagate parameters for which ``test(name, value)`` is truthy."""

    test: Callable[[str, str], Any]

    def select(self, query: Mapping[str, str]) -> dict[str, str]:
        return {key: value for key, value in query.items() if self.test(key, value)}


ParamsPolicy: TypeAlias = NoParams | AllParams | AllowList | Predicate

_POLICY_TYPES = (NoParams, AllParams, AllowList, Predicate)


def coerce_absolute(value: AbsoluteMode | str) -> AbsoluteMode:
    """Return the ``AbsoluteMode`` for *value*.

    Accepts the enum itself or its string value, case-insensitively.

    Raises:
        InvalidConfiguration: If *value* names no mode.
    """
    if isinstance(value, AbsoluteMode):
        return value
    if isinstance(value, str):
        try:
            return AbsoluteMode(value.lower())
        except ValueError:
            pass
    choices = ", ".join(repr(mode.value) for mode in AbsoluteMode)
    msg = f"Unknown absolute mode {value!r}. Expected one of {choices}."
    raise InvalidConfiguration(msg)


def coerce_params(value: object) -> ParamsPolicy:
    """Return the params policy variant for a loose *value*.

    ``None``/``False`` -> ``NoParams``, ``True`` -> ``AllParams``,
    a callable -> ``Predicate``, any other iterable of names -> ``AllowList``.

    Raises:
        InvalidConfiguration: If *value* fits none of these shapes.
    """
    if isinstance(value, _POLICY_TYPES):
        return value
    if value is None or value is False:
        return NoParams()
    if value is True:
        return AllParams()
    if callable(value):
        return Predicate(value)
    # A bare str is one name, not a list of names.
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
        names = tuple(value)
        bad = sorted(repr(name) for name in names if not isinstance(name, str))
        if bad:
            msg = f"params allow-list must contain only strings, got {', '.join(bad)}"
            raise InvalidConfiguration(msg)
        return AllowList(frozenset(names))
    msg = (
        f"Invalid params policy {value!r}. Expected a bool, a collection of "
        "parameter names, a callable(name, value), or a policy variant."
    )
    raise InvalidConfiguration(msg)


def allow(names: Iterable[str]) -> AllowList:
    """Shorthand for ``AllowList(frozenset(names))``."""
    return AllowList(frozenset(names))


@dataclass(frozen=True, slots=True)
class LinkOptions:
    """One layer of link options. ``None`` fields defer to the layer below."""

    absolute: AbsoluteMode | None = None
    params: ParamsPolicy | None = None

    @classmethod
    def of(cls, absolute: AbsoluteMode | str | None = None, params: object = None) -> LinkOptions:
        """Build a layer from loose values, validating each set field.

        ``params=None`` leaves the field unset; pass ``False`` or
        ``NoParams()`` to switch propagation off explicitly.
        """
        return cls(
            absolute=None if absolute is None else coerce_absolute(absolute),
            params=None if params is None else coerce_params(params),
        )

    def merge(self, other: LinkOptions | None) -> LinkOptions:
        """Return this layer overridden by the set fields of *other*."""
        if other is None:
            return self
        return LinkOptions(
            absolute=other.absolute if other.absolute is not None else self.absolute,
            params=other.params if other.params is not None else self.params,
        )

    def resolved(self) -> tuple[AbsoluteMode, ParamsPolicy]:
        """Fill unset fields with defaults (``PROXY``, ``NoParams``)."""
        absolute = self.absolute if self.absolute is not None else AbsoluteMode.PROXY
        params = self.params if self.params is not None else NoParams()
        if not isinstance(absolute, AbsoluteMode):
            absolute = coerce_absolute(absolute)
        if not isinstance(params, _POLICY_TYPES):
            params = coerce_params(params)
        return absolute, params
