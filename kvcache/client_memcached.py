import math
from typing import Any, Dict, Iterable

from pymemcache import serde
from pymemcache.client.hash import HashClient
from pymemcache.client.rendezvous import RendezvousHash
from pymemcache.exceptions import MemcacheError

from .adapter import CacheClientAdapter
from .servers import ServerDescriptor


class WeightedRendezvousHash(RendezvousHash):
    """Rendezvous hashing where each node's share follows its weight."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.weights: Dict[str, int] = {}

    def set_weight(self, node: str, weight: int) -> None:
        self.weights[node] = weight

    def get_node(self, key):
        winner = None
        high_score = None
        for node in self.nodes:
            # map the 32-bit hash into (0, 1) so the log is always negative
            h = ((self.hash_function(f"{node}-{key}") & 0xFFFFFFFF) + 1) / 4294967297.0
            score = -self.weights.get(node, 1) / math.log(h)
            if high_score is None or score > high_score:
                high_score, winner = score, node
        return winner


class MemcachedAdapter(CacheClientAdapter):
    """Adapter for the ``memcached`` client (pymemcache's HashClient)."""

    name = "memcached"
    errors = CacheClientAdapter.errors + (MemcacheError,)

    def _create_client(self) -> HashClient:
        return HashClient(
            [],
            hasher=WeightedRendezvousHash,
            serde=serde.pickle_serde,
            connect_timeout=self.config.CONNECT_TIMEOUT,
            timeout=self.config.SOCKET_TIMEOUT,
            retry_attempts=self.config.RETRY_ATTEMPTS,
            dead_timeout=self.config.DEAD_TIMEOUT,
            default_noreply=False
        )

    def register(self, server: ServerDescriptor) -> None:
        self.add_server(server.host, server.port, server.weight)

    def add_server(self, host: str, port: int, weight: int) -> None:
        client = self.instance()
        client.hasher.set_weight(f"{host}:{port}", weight)
        client.add_server(host, port)

    def get(self, key: str) -> Any:
        return self._call("get", None, self.instance().get, key)

    def get_multi(self, keys: Iterable[str]) -> Dict[str, Any]:
        keys = list(keys)
        if not keys:
            return {}
        return self._call("get_multi", {}, self.instance().get_many, keys) or {}

    def set(self, key: str, value: Any, expiry: int) -> bool:
        return bool(self._call("set", False, self.instance().set, key, value, expiry, noreply=False))

    def add(self, key: str, value: Any, expiry: int) -> bool:
        return bool(self._call("add", False, self.instance().add, key, value, expiry, noreply=False))

    def delete(self, key: str) -> bool:
        """True unless the server could not be reached; a missing key counts as deleted."""
        return bool(self._call("delete", False, self.instance().delete, key, noreply=True))

    def flush(self) -> bool:
        def flush_all():
            self.instance().flush_all(noreply=False)
            return True
        return self._call("flush", False, flush_all)

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
