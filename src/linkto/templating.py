"""Kida template globals for building links.

Templates rendered while a request is active can emit client-facing
URLs the same way handlers do::

    <a href="{{ link_to('../edit') }}">Edit</a>
    <a href="{{ link_to('/search', params=['q']) }}">Search again</a>

The globals read the current request's builder from the ContextVar
set by ``LinkToMiddleware``; rendering outside a request raises
``LookupError``.
"""

from typing import Any

from kida import Environment

from linkto.context import link_to

LINK_GLOBALS: dict[str, Any] = {
    "link_to": link_to,
    "linkto": link_to,
}


def register_globals(env: Environment) -> Environment:
    """Add the link globals to *env* and return it."""
    for name, value in LINK_GLOBALS.items():
        env.add_global(name, value)
    return env
