from pydantic_settings import BaseSettings, SettingsConfigDict

class CacheConfig(BaseSettings):
    # General
    USE_MEMCACHED: bool = True
    CACHE_PREFIX: str = ""
    DEFAULT_TTL: int = 0  # 0 means never expire

    # Fallback node when no servers are configured
    DEFAULT_HOST: str = "localhost"
    DEFAULT_PORT: int = 11211

    # Network
    CONNECT_TIMEOUT: float = 1.0
    SOCKET_TIMEOUT: float = 1.0

    # Legacy client (python-memcached)
    DEAD_RETRY: int = 15

    # Successor client (pymemcache)
    DEAD_TIMEOUT: int = 60
    RETRY_ATTEMPTS: int = 2

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="KV_",
        extra="ignore"
    )
