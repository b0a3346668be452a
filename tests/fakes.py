"""In-memory stand-ins for the two native memcache clients."""
import time


class _Store:
    def __init__(self):
        self.data = {}

    def _alive(self, key):
        if key not in self.data:
            return False
        _, expire = self.data[key]
        if expire and expire <= time.time():
            del self.data[key]
            return False
        return True

    def _get(self, key):
        return self.data[key][0] if self._alive(key) else None


class FakeHost:
    def __init__(self, spec):
        if isinstance(spec, tuple):
            spec, self.weight = spec
        else:
            self.weight = 1
        self.address = spec


class FakeMemcacheClient(_Store):
    """Mimics ``NodeClient`` over python-memcached, without thread-local state."""

    def __init__(self, nodes, **kwargs):
        super().__init__()
        self.nodes = nodes
        self.kwargs = kwargs
        self.servers = []
        self.loads = 0
        self.load_servers()
        self.disconnected = False

    def load_servers(self):
        self.loads += 1
        self.servers = [FakeHost((f"{n[0]}:{n[1]}", n[3])) for n in self.nodes]

    def get(self, key):
        return self._get(key)

    def get_multi(self, keys):
        return {k: self._get(k) for k in keys if self._alive(k)}

    def set(self, key, val, time=0):
        self.data[key] = (val, time)
        return True

    def add(self, key, val, time=0):
        if self._alive(key):
            return 0
        return self.set(key, val, time)

    def delete(self, key, time=None):
        self.data.pop(key, None)
        return 1

    def flush_all(self):
        self.data.clear()

    def disconnect_all(self):
        self.disconnected = True


class FakeHashClient(_Store):
    """Mimics ``pymemcache.client.hash.HashClient``."""

    def __init__(self, servers, hasher=None, **kwargs):
        super().__init__()
        self.kwargs = kwargs
        self.hasher = hasher()
        self.clients = {}
        for host, port in servers:
            self.add_server(host, port)
        self.closed = False

    def add_server(self, server, port=None):
        key = f"{server}:{port}"
        self.clients[key] = (server, port)
        self.hasher.add_node(key)

    def get(self, key, default=None):
        value = self._get(key)
        return default if value is None else value

    def get_many(self, keys):
        return {k: self._get(k) for k in keys if self._alive(k)}

    def set(self, key, value, expire=0, noreply=None):
        self.data[key] = (value, expire)
        return True

    def add(self, key, value, expire=0, noreply=None):
        if self._alive(key):
            return False
        return self.set(key, value, expire)

    def delete(self, key, noreply=None):
        present = self.data.pop(key, None) is not None
        return noreply or present

    def flush_all(self, delay=0, noreply=None):
        self.data.clear()
        return True

    def close(self):
        self.closed = True


class BrokenClient:
    """Native client whose every call fails like an unreachable server."""

    def __init__(self, exc):
        self.exc = exc

    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise self.exc
        return fail
