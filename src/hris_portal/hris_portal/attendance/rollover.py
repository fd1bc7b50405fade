from __future__ import annotations

import logging
import threading
from typing import Callable, Optional

from ..common.datetime_utils import now_local, seconds_until_next_midnight

logger = logging.getLogger(__name__)


class MidnightRollover:
    """Fires ``callback`` at every local midnight.

    Each firing re-arms a fresh timer computed from the clock at that moment.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        clock=now_local,
        timer_factory=threading.Timer,
    ):
        self._callback = callback
        self._clock = clock
        self._timer_factory = timer_factory
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.Lock()
        self._stopped = True

    @property
    def running(self) -> bool:
        return not self._stopped

    def start(self) -> None:
        with self._lock:
            self._stopped = False
        self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._stopped = True
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()

    def _arm(self) -> None:
        delay = seconds_until_next_midnight(self._clock())
        with self._lock:
            if self._stopped:
                return
            timer = self._timer_factory(delay, self._fire)
            timer.daemon = True
            self._timer = timer
        timer.start()
        logger.debug("Midnight rollover armed in %.0f seconds", delay)

    def _fire(self) -> None:
        try:
            self._callback()
        finally:
            self._arm()
