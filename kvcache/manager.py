import logging
import threading
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from .adapter import CacheClientAdapter, create_adapter
from .base import KV
from .config import CacheConfig
from .exceptions import CapabilityLockedError
from .expiration import ExpirationPolicy
from .servers import FLAG_KEY, ServerDescriptor, ServerPool, capability_name

logger = logging.getLogger(__name__)

class KVCache(KV):
    """Memcache data source backed by either python-memcached or pymemcache.

    ``use_memcached`` picks pymemcache (``memcached``) or python-memcached
    (``memcache``). The choice is fixed once the client has been created.
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        servers: Optional[Mapping[str, Any]] = None,
        expiration: Optional[ExpirationPolicy] = None
    ):
        super().__init__()
        self.config = config or CacheConfig()
        self.key_prefix = self.config.CACHE_PREFIX
        self.default_ttl = self.config.DEFAULT_TTL
        self.expiration = expiration or ExpirationPolicy()
        self.pool = ServerPool()

        self._use_memcached = self.config.USE_MEMCACHED
        self._server_config: Dict[str, Any] = {}
        self._adapter: Optional[CacheClientAdapter] = None
        self._lock = threading.RLock()
        self._registered = False

        if servers is not None:
            self.set_servers(servers)

    @property
    def use_memcached(self) -> bool:
        return self._use_memcached

    @use_memcached.setter
    def use_memcached(self, value: bool) -> None:
        value = bool(value)
        self._check_capability(value)
        self._use_memcached = value

    def _check_capability(self, use_memcached: bool) -> None:
        if self._adapter is not None and use_memcached != self._use_memcached:
            raise CapabilityLockedError(
                active=capability_name(self._use_memcached),
                requested=capability_name(use_memcached)
            )

    def set_servers(self, config: Optional[Mapping[str, Any]]) -> List[ServerDescriptor]:
        """Validate and keep a ``{"useMemcached", "memcache", "memcached"}`` mapping.

        Nothing changes unless the whole mapping is valid.
        """
        config = dict(config or {})
        requested = bool(config.get(FLAG_KEY, self._use_memcached))
        self._check_capability(requested)

        pool = ServerPool()
        servers = pool.configure(config, requested)

        self._use_memcached = requested
        self.pool = pool
        self._server_config = config
        return servers

    def get_servers(self) -> List[ServerDescriptor]:
        return self.pool.current()

    def get_adapter(self) -> CacheClientAdapter:
        if self._adapter is None:
            with self._lock:
                if self._adapter is None:
                    self._adapter = create_adapter(self._use_memcached, self.config)
        return self._adapter

    @property
    def adapter(self) -> CacheClientAdapter:
        return self.get_adapter()

    def init(self) -> None:
        with self._lock:
            if self._registered:
                logger.debug("Cache already initialized, servers not registered again")
                super().init()
                return

            servers = self.pool.configure(self._server_config, self._use_memcached)
            count = self.get_adapter().register_servers(servers)
            self._registered = True
            super().init()
            logger.info(f"Registered {count} {self.adapter.name} server(s)")

    def get_value(self, key: str) -> Any:
        return self.adapter.get(key)

    def get_values(self, keys: Iterable[str]) -> Dict[str, Any]:
        return self.adapter.get_multi(keys)

    def set_value(self, key: str, value: Any, expire: Union[int, timedelta]) -> bool:
        return self.adapter.set(key, value, self.expiration.normalize(expire))

    def add_value(self, key: str, value: Any, expire: Union[int, timedelta]) -> bool:
        return self.adapter.add(key, value, self.expiration.normalize(expire))

    def delete_value(self, key: str) -> bool:
        return self.adapter.delete(key)

    def clear_values(self) -> bool:
        return self.adapter.flush()

    def close(self) -> None:
        if self._adapter is not None:
            self._adapter.close()

def create_cache(settings: Any = None, servers: Optional[Mapping[str, Any]] = None) -> KVCache:
    config = CacheConfig()
    if settings:
        if hasattr(settings, 'use_memcached'):
            config.USE_MEMCACHED = settings.use_memcached
        if hasattr(settings, 'cache_ttl'):
            config.DEFAULT_TTL = settings.cache_ttl
        if hasattr(settings, 'cache_prefix'):
            config.CACHE_PREFIX = settings.cache_prefix
        if hasattr(settings, 'memcache_host'):
            config.DEFAULT_HOST = settings.memcache_host
        if hasattr(settings, 'memcache_port'):
            config.DEFAULT_PORT = settings.memcache_port
    return KVCache(config, servers=servers)
