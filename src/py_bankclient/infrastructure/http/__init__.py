"""HTTP contract layer (httpx)."""

from .client import ApiClient
from .errors import ApiError, InvalidResponseError, TransportError

__all__ = ["ApiClient", "ApiError", "InvalidResponseError", "TransportError"]
