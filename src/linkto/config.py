"""Link middleware configuration.

LinkConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from linkto.options import AbsoluteMode, LinkOptions, ParamsPolicy
from linkto.proxy import ProxyResolver


@dataclass(frozen=True, slots=True)
class LinkConfig:
    """Link middleware configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = LinkConfig(trust_proxy=True, params=["lang"])
    """

    # Forwarding headers are ignored unless this is set
    trust_proxy: bool = False

    # Base link options (per-call options override these)
    absolute: AbsoluteMode | str = AbsoluteMode.PROXY
    params: ParamsPolicy | bool | Iterable[str] | Callable[[str, str], Any] | None = None

    # Route mount prefix; None means use the ASGI root_path
    route_base: str | None = None

    # Forwarding header names
    forwarded_host_header: str = "x-forwarded-host"
    forwarded_path_header: str = "x-forwarded-path"
    forwarded_proto_header: str = "x-forwarded-proto"

    def base_options(self) -> LinkOptions:
        """The validated base option layer.

        Raises:
            InvalidConfiguration: If ``absolute`` or ``params`` is malformed.
        """
        return LinkOptions.of(self.absolute, self.params)

    def resolver(self) -> ProxyResolver:
        """A ``ProxyResolver`` using this config's trust and header names."""
        return ProxyResolver(
            trust_proxy=self.trust_proxy,
            forwarded_host_header=self.forwarded_host_header,
            forwarded_path_header=self.forwarded_path_header,
            forwarded_proto_header=self.forwarded_proto_header,
        )
