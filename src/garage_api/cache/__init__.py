"""
garage_api.cache

Optional pass-through cache layer.

Responsibilities:
- Define the cache interface used by services.
- Provide Redis-backed and no-op implementations.
"""

from garage_api.cache.backends import Cache, NullCache, RedisCache

__all__ = ["Cache", "NullCache", "RedisCache"]


# --- Module Notes -----------------------------------------------------------
# The cache only stores serialized read results; it never holds authorization state.
