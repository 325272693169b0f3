"""Value objects."""

from .request_context import DEFAULT_REQUEST_CONTEXT, RequestContext

__all__ = ["DEFAULT_REQUEST_CONTEXT", "RequestContext"]
