import logging
from typing import Any, List, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import CacheConfigurationError

logger = logging.getLogger(__name__)

LEGACY_KEY = "memcache"
SUCCESSOR_KEY = "memcached"
FLAG_KEY = "useMemcached"


class ServerDescriptor(BaseModel):
    """Connection parameters of one cache node.

    Only ``host``, ``port`` and ``weight`` are used by the memcached
    (pymemcache) client; the other fields only apply to the memcache
    (python-memcached) client.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    host: str = Field(default="localhost", min_length=1)
    port: int = Field(default=11211, gt=0)
    weight: int = Field(default=1, ge=1)
    persistent: bool = False
    timeout: int = Field(default=1, gt=0)
    retry_interval: int = Field(default=15, ge=0, alias="retryInterval")
    status: bool = True


def capability_name(use_memcached: bool) -> str:
    return SUCCESSOR_KEY if use_memcached else LEGACY_KEY


class ServerPool:
    """Ordered, validated list of cache nodes for the active capability."""

    def __init__(self, servers: Optional[Sequence[ServerDescriptor]] = None):
        self._servers: List[ServerDescriptor] = list(servers or [])

    def configure(self, raw_config: Optional[Mapping[str, Any]], use_memcached: bool) -> List[ServerDescriptor]:
        """Build the pool from a ``{"useMemcached", "memcache", "memcached"}`` mapping.

        Only the sub-mapping matching ``use_memcached`` is read. The current
        pool is replaced only when every entry validates.
        """
        name = capability_name(use_memcached)
        raw_config = raw_config or {}

        if name not in raw_config:
            if raw_config and FLAG_KEY in raw_config:
                raise CacheConfigurationError(capability=name, reason=f"'{name}' section is missing")
            self._servers = []
            return self.current()

        section = raw_config[name]
        if section is None:
            entries: List[Any] = []
        elif isinstance(section, Mapping):
            entries = list(section.values())
        elif isinstance(section, (list, tuple)):
            entries = list(section)
        else:
            raise CacheConfigurationError(
                capability=name,
                reason=f"expected a list of servers, got {type(section).__name__}"
            )

        servers = []
        for index, entry in enumerate(entries):
            if isinstance(entry, ServerDescriptor):
                servers.append(entry)
                continue
            if not isinstance(entry, Mapping):
                raise CacheConfigurationError(capability=name, reason=f"server #{index} is not a mapping")
            try:
                servers.append(ServerDescriptor.model_validate(entry))
            except ValidationError as e:
                raise CacheConfigurationError(capability=name, reason=f"server #{index}: {e}") from e

        self._servers = servers
        logger.debug(f"Configured {len(servers)} '{name}' server(s)")
        return self.current()

    def current(self) -> List[ServerDescriptor]:
        return list(self._servers)

    def __iter__(self):
        return iter(self._servers)

    def __len__(self) -> int:
        return len(self._servers)
