"""Rate limiting for warnings that can fire on every tick."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable


class WarningThrottle:
    """Emit at most one warning per key every ``interval`` seconds."""

    def __init__(
        self,
        logger: logging.Logger,
        interval: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval < 0.0:
            raise ValueError("interval must be >= 0")
        self.logger = logger
        self.interval = interval
        self._clock = clock
        self._last_emitted: dict[str, float] = {}
        self.suppressed = 0

    def warning(self, key: str, msg: str, *args: object) -> bool:
        """Log ``msg % args`` unless ``key`` fired less than ``interval`` ago.

        Returns True if the message was emitted.
        """
        now = self._clock()
        last = self._last_emitted.get(key)
        if last is not None and now - last < self.interval:
            self.suppressed += 1
            return False
        self._last_emitted[key] = now
        self.logger.warning(msg, *args)
        return True
