"""Speed-round countdown."""

import asyncio
from collections.abc import Callable

import structlog

logger = structlog.get_logger()


class SpeedRoundTimer:
    """Fires ``on_timeout`` once after the time budget unless cancelled first.

    Uses the running event loop; without one the timer stays disarmed and
    the caller falls back to measuring elapsed time on submission.

    Args:
        time_limit_ms: Budget in milliseconds.
        on_timeout: Called with no arguments when the budget runs out.
    """

    def __init__(self, time_limit_ms: int, on_timeout: Callable[[], object]) -> None:
        self.time_limit_ms = time_limit_ms
        self._on_timeout = on_timeout
        self._handle: asyncio.TimerHandle | None = None
        self._fired = False

    @property
    def armed(self) -> bool:
        return self._handle is not None and not self._fired

    @property
    def fired(self) -> bool:
        return self._fired

    def start(self) -> bool:
        """Arm the timer. Returns False when no event loop is running."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return False
        self._handle = loop.call_later(self.time_limit_ms / 1000, self._fire)
        return True

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        if self._fired:
            return
        self._fired = True
        self._handle = None
        logger.debug("speed_round_timeout", time_limit_ms=self.time_limit_ms)
        self._on_timeout()
