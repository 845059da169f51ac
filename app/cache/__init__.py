"""
Cache gateways for competitor records.
"""

from app.cache.gateway import (
    CacheGateway,
    CacheUnavailableError,
    InMemoryCacheGateway,
    RedisCacheGateway,
    build_cache_gateway,
    competitor_cache_key,
)

__all__ = [
    "CacheGateway",
    "CacheUnavailableError",
    "InMemoryCacheGateway",
    "RedisCacheGateway",
    "build_cache_gateway",
    "competitor_cache_key",
]
