from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, Optional, Union
from datetime import timedelta

Ttl = Optional[Union[int, timedelta]]

class KV(ABC):
    """Key-value data source.

    Subclasses implement the ``*_value(s)`` primitives against a backend;
    the public methods add key prefixing, default TTLs and lazy init.
    """

    key_prefix: str = ""
    default_ttl: int = 0

    def __init__(self):
        self._initialized = False

    def init(self) -> None:
        self._initialized = True

    def _ensure_init(self) -> None:
        if not self._initialized:
            self.init()

    def _make_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    def get(self, key: str) -> Any:
        """Retrieve an item, or None on a miss."""
        self._ensure_init()
        return self.get_value(self._make_key(key))

    def get_many(self, keys: Iterable[str]) -> Dict[str, Any]:
        """Retrieve the items that exist, keyed by the caller's keys."""
        self._ensure_init()
        lookup = {self._make_key(key): key for key in keys}
        if not lookup:
            return {}
        found = self.get_values(list(lookup))
        return {lookup[k]: v for k, v in found.items() if k in lookup}

    def set(self, key: str, value: Any, ttl: Ttl = None) -> bool:
        self._ensure_init()
        return self.set_value(self._make_key(key), value, self.default_ttl if ttl is None else ttl)

    def add(self, key: str, value: Any, ttl: Ttl = None) -> bool:
        """Store an item only if the key is not cached yet."""
        self._ensure_init()
        return self.add_value(self._make_key(key), value, self.default_ttl if ttl is None else ttl)

    def delete(self, key: str) -> bool:
        self._ensure_init()
        return self.delete_value(self._make_key(key))

    def clear(self) -> bool:
        self._ensure_init()
        return self.clear_values()

    def close(self) -> None:
        pass

    @abstractmethod
    def get_value(self, key: str) -> Any:
        pass

    @abstractmethod
    def get_values(self, keys: Iterable[str]) -> Dict[str, Any]:
        pass

    @abstractmethod
    def set_value(self, key: str, value: Any, expire: Union[int, timedelta]) -> bool:
        pass

    @abstractmethod
    def add_value(self, key: str, value: Any, expire: Union[int, timedelta]) -> bool:
        pass

    @abstractmethod
    def delete_value(self, key: str) -> bool:
        pass

    @abstractmethod
    def clear_values(self) -> bool:
        pass
