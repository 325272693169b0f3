"""
Request context value object.

Carries the network and device facts stamped on every audit event. The
core has no access to the real client, so callers supply these values;
the defaults are the placeholders used when nothing better is known.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """Client facts copied onto each security event."""

    ip_address: str = "Unknown"
    """Client IP address, or "Unknown" when not observable."""

    user_agent: str = "React Native App"
    """Client user agent string."""


DEFAULT_REQUEST_CONTEXT = RequestContext()
