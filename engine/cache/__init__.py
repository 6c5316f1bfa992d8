"""Cache Module - Caching services."""
from engine.cache.extraction_cache import (
    ExtractionCache,
    InMemoryExtractionCache,
    RedisExtractionCache,
    make_cache_key,
    CACHE_TTL_SECONDS
)

__all__ = [
    'ExtractionCache',
    'InMemoryExtractionCache',
    'RedisExtractionCache',
    'make_cache_key',
    'CACHE_TTL_SECONDS'
]
