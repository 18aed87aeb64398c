from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional, Tuple

logger = logging.getLogger(__name__)


class Debouncer:
    """Cancellable deferred invocation for one input field.

    Each call replaces whatever is pending and restarts the quiet window, so
    only the newest input is ever applied. `close()` on teardown.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        wait: float = 0.3,
        timer_factory: Callable[..., Any] = threading.Timer,
    ):
        self._func = func
        self.wait = wait
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer = None
        self._call: Optional[Tuple[tuple, dict]] = None
        self._generation = 0
        self._closed = False

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        with self._lock:
            if self._closed:
                logger.debug("Ignoring call on closed debouncer for %r", self._func)
                return
            self._cancel_timer()
            self._generation += 1
            self._call = (args, kwargs)
            timer = self._timer_factory(self.wait, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    @property
    def pending(self) -> bool:
        return self._call is not None

    def cancel(self) -> None:
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            self._call = None

    def flush(self) -> None:
        """Run the pending invocation now instead of waiting for the timer."""
        with self._lock:
            self._cancel_timer()
            self._generation += 1
            call, self._call = self._call, None
        if call is not None:
            self._invoke(call)

    def close(self) -> None:
        with self._lock:
            self._closed = True
        self.cancel()

    def __enter__(self) -> "Debouncer":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            # superseded after the timer thread had already woken up
            if generation != self._generation or self._call is None:
                return
            call, self._call = self._call, None
            self._timer = None
        self._invoke(call)

    def _invoke(self, call: Tuple[tuple, dict]) -> None:
        args, kwargs = call
        try:
            self._func(*args, **kwargs)
        except Exception:
            logger.exception("Debounced call to %r failed", self._func)
