"""
Adapters package - External service connections.
HTTP transport for the ordering API.
"""

from adapters.http_adapter import HTTPAdapter, MemoryTokenStore, TokenStore

__all__ = [
    "HTTPAdapter",
    "MemoryTokenStore",
    "TokenStore",
]
