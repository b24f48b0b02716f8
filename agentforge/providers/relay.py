"""
Read-through relay for requests blocked at the transport level.

The relay receives the target URL percent-encoded in its own URL and is
sent the original POST body. Credential headers are only forwarded to a
relay the operator marked as trusted.
"""

from typing import Optional
from urllib.parse import quote

import httpx

from agentforge.providers.base import PreparedRequest

# Headers never sent to an untrusted relay
CREDENTIAL_HEADERS = frozenset({"authorization"})


class Relay:
    """
    Args:
        url_template: Relay URL containing a ``{url}`` placeholder.
        trusted: Forward credential headers to the relay.
    """

    def __init__(self, url_template: str, trusted: bool = False):
        if "{url}" not in url_template:
            raise ValueError("Relay URL template must contain '{url}'")
        self.url_template = url_template
        self.trusted = trusted

    @classmethod
    def from_template(cls, url_template: Optional[str], trusted: bool = False) -> Optional["Relay"]:
        """Build a relay, or None when the template is empty (relay disabled)."""
        if not url_template:
            return None
        return cls(url_template, trusted=trusted)

    def wrap_url(self, target: str) -> str:
        return self.url_template.format(url=quote(target, safe=""))

    def wrap(self, request: PreparedRequest) -> PreparedRequest:
        """Return the same request addressed to the relay."""
        headers = dict(request.headers)
        if not self.trusted:
            headers = {k: v for k, v in headers.items() if k.lower() not in CREDENTIAL_HEADERS}
        return PreparedRequest(
            url=self.wrap_url(request.url),
            body=request.body,
            headers=headers,
        )


def is_blocked_failure(exc: httpx.TransportError) -> bool:
    """
    True when a transport failure means the target refused or never accepted
    the connection from this origin, the case a relay can route around.

    Timeouts, read errors and protocol errors mean the target was reached,
    so they are not retried.
    """
    return isinstance(exc, (httpx.ConnectError, httpx.ProxyError))
