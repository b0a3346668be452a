from .manager import KVCache, create_cache
from .config import CacheConfig
from .base import KV
from .adapter import CacheClientAdapter, create_adapter
from .servers import ServerDescriptor, ServerPool
from .expiration import ExpirationPolicy
from .exceptions import CacheError, CacheConfigurationError, CapabilityLockedError

# Alias matching the data source name
MemcacheCache = KVCache

__all__ = [
    'KVCache',
    'create_cache',
    'KV',
    'CacheClientAdapter',
    'create_adapter',
    'ServerDescriptor',
    'ServerPool',
    'ExpirationPolicy',
    'CacheConfig',
    'CacheError',
    'CacheConfigurationError',
    'CapabilityLockedError',
    'MemcacheCache'
]
