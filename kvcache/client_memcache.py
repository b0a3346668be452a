import logging
from typing import Any, Dict, Iterable, List, Tuple

import memcache

from .adapter import CacheClientAdapter
from .servers import ServerDescriptor

logger = logging.getLogger(__name__)

# host, port, persistent, weight, timeout, retry_interval, status
NodeSpec = Tuple[str, int, bool, int, int, int, bool]


class NodeClient(memcache.Client):
    """``memcache.Client`` built from a shared list of node specs.

    ``memcache.Client`` is thread-local: ``__init__`` runs again in every
    thread that touches it. The node list is passed by reference, so each
    thread builds its hosts from the registered pool.
    """

    def __init__(self, nodes: List[NodeSpec], **kwargs):
        self.nodes = nodes
        super().__init__([], **kwargs)
        self.load_servers()

    def load_servers(self) -> None:
        self.set_servers([(f"{host}:{port}", weight) for host, port, _, weight, _, _, _ in self.nodes])
        for node, (_, _, _, _, timeout, retry_interval, status) in zip(self.servers, self.nodes):
            node.socket_timeout = timeout
            node.dead_retry = retry_interval
            if not status:
                node.mark_dead("registered offline")


class MemcacheAdapter(CacheClientAdapter):
    """Adapter for the legacy ``memcache`` client (python-memcached).

    python-memcached has no per-call flags argument and stores values with
    its own pickling, so ``set``/``add`` only pass key, value and expiry.
    Sockets are per thread; ``close`` disconnects the calling thread's.
    """

    name = "memcache"
    errors = CacheClientAdapter.errors + (memcache.Client.MemcachedKeyError,)

    def __init__(self, config=None):
        super().__init__(config)
        self._nodes: List[NodeSpec] = []

    def _create_client(self) -> NodeClient:
        return NodeClient(
            self._nodes,
            dead_retry=self.config.DEAD_RETRY,
            socket_timeout=self.config.SOCKET_TIMEOUT
        )

    def register(self, server: ServerDescriptor) -> None:
        self.add_server(
            server.host,
            server.port,
            server.persistent,
            server.weight,
            server.timeout,
            server.retry_interval,
            server.status
        )

    def add_server(self, host: str, port: int, persistent: bool, weight: int,
                   timeout: int, retry_interval: int, status: bool) -> None:
        """Queue a node; hosts are built once in ``_servers_registered``."""
        self._nodes.append((host, port, persistent, weight, timeout, retry_interval, status))
        if not persistent:
            logger.debug(f"memcache node {host}:{port} requested non-persistent connections; sockets are kept open")

    def _servers_registered(self) -> None:
        self.instance().load_servers()

    def get(self, key: str) -> Any:
        return self._call("get", None, self.instance().get, key)

    def get_multi(self, keys: Iterable[str]) -> Dict[str, Any]:
        keys = list(keys)
        if not keys:
            return {}
        return self._call("get_multi", {}, self.instance().get_multi, keys) or {}

    def set(self, key: str, value: Any, expiry: int) -> bool:
        return bool(self._call("set", False, self.instance().set, key, value, expiry))

    def add(self, key: str, value: Any, expiry: int) -> bool:
        return bool(self._call("add", False, self.instance().add, key, value, expiry))

    def delete(self, key: str) -> bool:
        """True unless the server could not be reached; a missing key counts as deleted."""
        # second positional is the delete delay, never used
        return bool(self._call("delete", False, self.instance().delete, key, 0))

    def flush(self) -> bool:
        def flush_all():
            self.instance().flush_all()
            return True
        return self._call("flush", False, flush_all)

    def close(self) -> None:
        if self._client is not None:
            self._client.disconnect_all()
