import logging
import pickle
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type

from .config import CacheConfig
from .servers import ServerDescriptor

logger = logging.getLogger(__name__)


class CacheClientAdapter(ABC):
    """Normalized surface over one native memcache client.

    The native client is created on first use and kept for the lifetime of
    the adapter. Network failures never raise: reads report a miss and
    writes report ``False``.
    """

    name: str = ""
    errors: Tuple[Type[BaseException], ...] = (OSError, pickle.PickleError)

    def __init__(self, config: Optional[CacheConfig] = None):
        self.config = config or CacheConfig()
        self._client: Any = None
        self._lock = threading.Lock()

    @abstractmethod
    def _create_client(self) -> Any:
        pass

    @abstractmethod
    def register(self, server: ServerDescriptor) -> None:
        """Register one node using the client's native signature."""
        pass

    @property
    def created(self) -> bool:
        return self._client is not None

    def instance(self) -> Any:
        if self._client is None:
            with self._lock:
                if self._client is None:
                    self._client = self._create_client()
                    logger.debug(f"Created {self.name} client")
        return self._client

    def register_servers(self, pool: Iterable[ServerDescriptor]) -> int:
        servers = list(pool)
        if not servers:
            servers = [ServerDescriptor(host=self.config.DEFAULT_HOST, port=self.config.DEFAULT_PORT)]
            logger.info(f"No {self.name} servers configured, using {self.config.DEFAULT_HOST}:{self.config.DEFAULT_PORT}")

        self.instance()
        with self._lock:
            for server in servers:
                self.register(server)
            self._servers_registered()
        return len(servers)

    def _servers_registered(self) -> None:
        """Called once after a batch of ``register`` calls."""
        pass

    def _call(self, operation: str, default: Any, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except self.errors as e:
            logger.warning(f"{self.name} {operation} failed: {e}")
            return default

    @abstractmethod
    def get(self, key: str) -> Any:
        pass

    @abstractmethod
    def get_multi(self, keys: Iterable[str]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def set(self, key: str, value: Any, expiry: int) -> bool:
        pass

    @abstractmethod
    def add(self, key: str, value: Any, expiry: int) -> bool:
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        pass

    @abstractmethod
    def flush(self) -> bool:
        pass

    @abstractmethod
    def close(self) -> None:
        pass


def create_adapter(use_memcached: bool, config: Optional[CacheConfig] = None) -> CacheClientAdapter:
    """Return the adapter for the memcached (pymemcache) or memcache (python-memcached) client."""
    if use_memcached:
        from .client_memcached import MemcachedAdapter
        return MemcachedAdapter(config)
    from .client_memcache import MemcacheAdapter
    return MemcacheAdapter(config)
