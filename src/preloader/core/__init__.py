"""Core transport components."""

from .protocols import Response, Transport
from .transport import HttpTransport

__all__ = ["Transport", "Response", "HttpTransport"]
