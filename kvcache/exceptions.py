from typing import Any, Dict


class CacheError(Exception):
    """Base exception for cache errors.

    Subclasses define a numeric ``CODE`` and a ``TEMPLATE`` which is formatted
    with the keyword context given at raise time.
    """

    CODE = 0x80030100
    TEMPLATE = "cache error"

    def __init__(self, **context: Any):
        self.context = context
        try:
            message = self.TEMPLATE % context
        except (KeyError, TypeError, ValueError):
            message = self.TEMPLATE
        self.message = message
        super().__init__(message)

    @property
    def code(self) -> int:
        return self.CODE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": False,
            "error": {
                "code": hex(self.CODE),
                "message": self.message,
                "details": self.context
            }
        }


class CacheConfigurationError(CacheError):
    """Raised when the server pool configuration is invalid."""

    CODE = 0x80030101
    TEMPLATE = "invalid '%(capability)s' server configuration: %(reason)s"


class CapabilityLockedError(CacheError):
    """Raised when switching capability after the client was created."""

    CODE = 0x80030102
    TEMPLATE = "'%(active)s' client already created, cannot switch to '%(requested)s'"
