"""Test utilities for linkto-wrapped ASGI applications.

    from linkto.testing import Redirect, Response, TestClient, send_response
"""

from linkto.testing.client import TestClient
from linkto.testing.response import Redirect, Response, send_response

__all__ = ["Redirect", "Response", "TestClient", "send_response"]
