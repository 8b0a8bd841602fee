"""Debounced scan launching in response to library change notifications.

Every notification marks a scan as pending and re-arms a single delay
timer. When the timer fires with a scan still pending, exactly one scan is
run. Notifications arriving inside the window only push the timer back.
"""

from __future__ import annotations

import enum
import logging
import threading
from typing import Any, Callable, Optional

from .config import DEFAULT_DEBOUNCE_SECONDS

LOGGER = logging.getLogger(__name__)

TimerFactory = Callable[..., threading.Timer]


class TriggerState(enum.Enum):
    IDLE = "idle"
    ARMED = "armed"
    FIRING = "firing"


class DebouncedScanTrigger:
    """Coalesces bursts of change notifications into one deferred scan.

    ``scan`` is called with no arguments on the timer thread. Its exceptions
    are logged and never reach the code that called :meth:`notify`.
    """

    def __init__(
        self,
        scan: Callable[[], Any],
        *,
        delay: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self._scan = scan
        self.delay = delay
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._scan_lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._generation = 0
        self._pending = False
        self._closed = False
        self._state = TriggerState.IDLE

    @property
    def state(self) -> TriggerState:
        with self._lock:
            return self._state

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending

    def notify(self, reason: Optional[str] = None) -> None:
        """Record a change and (re)arm the delay timer."""
        with self._lock:
            if self._closed:
                return
            self._pending = True
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self._timer_factory(self.delay, self._flush, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            if self._state is not TriggerState.FIRING:
                self._state = TriggerState.ARMED
            timer.start()
        if reason:
            LOGGER.debug("Library change noted (%s); scan deferred %.1fs", reason, self.delay)

    def _flush(self, generation: int) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                return
            self._timer = None
            run = self._pending
            self._pending = False
            if not run:
                self._state = TriggerState.IDLE
                return
            self._state = TriggerState.FIRING

        try:
            with self._scan_lock:
                LOGGER.info("Debounced library change detected; running subtitle scan.")
                self._scan()
        except Exception:  # noqa: BLE001
            LOGGER.warning("Subtitle scan failed during debounced run.", exc_info=True)
        finally:
            with self._lock:
                if self._state is TriggerState.FIRING:
                    self._state = TriggerState.ARMED if self._timer is not None else TriggerState.IDLE

    def shutdown(self) -> None:
        """Cancel any armed timer; no scan is launched afterwards."""
        with self._lock:
            self._closed = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = False
            self._generation += 1
            self._state = TriggerState.IDLE
        LOGGER.debug("Debounced scan trigger shut down")


__all__ = ["DebouncedScanTrigger", "TriggerState"]
