"""Notification channel.

This module holds the single transient status message shown to the user.
Publishers call show()/hide(); views subscribe to be told about changes.
Each show() replaces the current message and restarts the auto-hide timer.
"""

import logging
import threading
from typing import Callable, List, Optional, Protocol

from complaint_desk.config import NOTIFICATION_TIMEOUT_SECONDS
from complaint_desk.schemas.notification import Notification, NotificationSeverity

logger = logging.getLogger(__name__)

Subscriber = Callable[[Notification], None]


class CancellableTimer(Protocol):
    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], CancellableTimer]


def _daemon_timer(interval: float, callback: Callable[[], None]) -> threading.Timer:
    timer = threading.Timer(interval, callback)
    timer.daemon = True
    return timer


class NotificationChannel:
    """Publish/subscribe holder for the one visible notification."""

    def __init__(
        self,
        timeout: float = NOTIFICATION_TIMEOUT_SECONDS,
        timer_factory: TimerFactory = _daemon_timer,
    ):
        """Initialize NotificationChannel.

        Args:
            timeout: Seconds before a shown notification hides itself.
            timer_factory: Builds the auto-hide timer. Defaults to a daemon
                threading.Timer.
        """
        self._timeout = timeout
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._state = Notification()
        self._timer: Optional[CancellableTimer] = None
        self._generation = 0
        self._subscribers: List[Subscriber] = []

    @property
    def current(self) -> Notification:
        with self._lock:
            return self._state.model_copy()

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        """Register a callback for every state change.

        Returns:
            A function that removes the subscription.
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def show(
        self,
        message: str,
        severity: NotificationSeverity = NotificationSeverity.SUCCESS,
    ) -> None:
        """Display a message, superseding any visible one."""
        severity = NotificationSeverity(severity)
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            self._state = Notification(message=message, severity=severity, visible=True)
            self._timer = self._timer_factory(
                self._timeout, lambda: self._expire(generation)
            )
            self._timer.start()
        logger.info("Notification (%s): %s", severity.value, message)
        self._publish()

    def hide(self) -> None:
        """Hide the current notification immediately."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._state = self._state.model_copy(update={"visible": False})
        self._publish()

    def _expire(self, generation: int) -> None:
        with self._lock:
            # A newer show() owns the screen now
            if generation != self._generation or not self._state.visible:
                return
            self._timer = None
            self._state = self._state.model_copy(update={"visible": False})
        self._publish()

    def _publish(self) -> None:
        with self._lock:
            state = self._state.model_copy()
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(state)
            except Exception:
                logger.exception("Notification subscriber failed")
