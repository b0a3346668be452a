import logging
import time
from datetime import timedelta
from typing import Callable, Union

logger = logging.getLogger(__name__)


class ExpirationPolicy:
    """Converts relative TTLs into the expiry value sent to memcached.

    Both clients treat expiry values above 30 days as a Unix timestamp and
    smaller values as relative seconds, so any positive TTL is always sent as
    an absolute timestamp. Zero means never expire; negative TTLs are clamped
    to zero.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self.clock = clock

    def normalize(self, relative_seconds: Union[int, timedelta]) -> int:
        if isinstance(relative_seconds, timedelta):
            relative_seconds = int(relative_seconds.total_seconds())
        else:
            relative_seconds = int(relative_seconds)

        if relative_seconds > 0:
            return int(self.clock()) + relative_seconds
        if relative_seconds < 0:
            logger.debug(f"Negative TTL {relative_seconds} clamped to never expire")
        return 0
