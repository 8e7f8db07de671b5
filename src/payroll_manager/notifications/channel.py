"""In-process publish/subscribe relay behind the WebSocket endpoint.

Destinations under the topic prefix are broadcast to subscribers; destinations
under the application prefix carry client-originated messages to handlers
registered on the server. Delivery is best effort and in order per
subscription; nothing is persisted.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..core.constants import APP_PREFIX, EMPLOYEES_PATH, TOPIC_PREFIX
from ..core.enums import EmployeeEvent
from ..core.exceptions import ValidationError
from ..security.principal import Principal

logger = logging.getLogger(__name__)

DEFAULT_MAX_PENDING = 1000

MessageHandler = Callable[[Principal, Any], None]


@dataclass(frozen=True)
class Message:
    destination: str
    body: Any


@dataclass(eq=False)
class Subscription:
    destination: str
    max_pending: int = DEFAULT_MAX_PENDING
    _queue: "queue.Queue[Message]" = field(init=False, repr=False)
    closed: bool = False

    def __post_init__(self) -> None:
        self._queue = queue.Queue(maxsize=self.max_pending)

    def offer(self, message: Message) -> bool:
        if self.closed:
            return False
        try:
            self._queue.put_nowait(message)
            return True
        except queue.Full:
            return False

    def poll(self, timeout: Optional[float] = None) -> Optional[Message]:
        try:
            if timeout is None:
                return self._queue.get_nowait()
            return self._queue.get(timeout=timeout)
        except queue.Empty:
            return None

    def drain(self) -> List[Message]:
        out: List[Message] = []
        while True:
            message = self.poll()
            if message is None:
                return out
            out.append(message)


def topic_for(event: EmployeeEvent) -> str:
    return f"{TOPIC_PREFIX}/{event.value}"


def employee_path(employee_id: int) -> str:
    return f"{EMPLOYEES_PATH}/{employee_id}"


class NotificationChannel:
    def __init__(
        self,
        *,
        topic_prefix: str = TOPIC_PREFIX,
        app_prefix: str = APP_PREFIX,
        max_pending: int = DEFAULT_MAX_PENDING,
    ):
        self._topic_prefix = topic_prefix.rstrip("/")
        self._app_prefix = app_prefix.rstrip("/")
        self._max_pending = max_pending
        self._subscriptions: Dict[str, List[Subscription]] = {}
        self._handlers: Dict[str, MessageHandler] = {}
        self._lock = threading.Lock()

    def _require_prefix(self, destination: str, prefix: str) -> str:
        if not isinstance(destination, str) or not destination.startswith(prefix + "/"):
            raise ValidationError(f"Destination must start with {prefix}/")
        return destination

    def subscribe(self, destination: str) -> Subscription:
        destination = self._require_prefix(destination, self._topic_prefix)
        subscription = Subscription(destination=destination, max_pending=self._max_pending)
        with self._lock:
            self._subscriptions.setdefault(destination, []).append(subscription)
        return subscription

    def close(self, subscription: Subscription) -> None:
        subscription.closed = True
        with self._lock:
            subs = self._subscriptions.get(subscription.destination, [])
            if subscription in subs:
                subs.remove(subscription)
            if not subs:
                self._subscriptions.pop(subscription.destination, None)

    def subscriber_count(self, destination: Optional[str] = None) -> int:
        with self._lock:
            if destination is not None:
                return len(self._subscriptions.get(destination, []))
            return sum(len(subs) for subs in self._subscriptions.values())

    def publish(self, destination: str, body: Any) -> int:
        destination = self._require_prefix(destination, self._topic_prefix)
        with self._lock:
            targets = list(self._subscriptions.get(destination, []))

        message = Message(destination=destination, body=body)
        delivered = 0
        for subscription in targets:
            if subscription.offer(message):
                delivered += 1
            else:
                logger.warning("Dropped message for %s: subscriber queue full", destination)
        logger.debug("Published %s to %d subscriber(s)", destination, delivered)
        return delivered

    def publish_employee_event(self, event: EmployeeEvent, employee_id: int) -> int:
        return self.publish(topic_for(event), employee_path(employee_id))

    def on_message(self, destination: str, handler: MessageHandler) -> None:
        destination = self._require_prefix(destination, self._app_prefix)
        with self._lock:
            self._handlers[destination] = handler

    def send(self, destination: str, body: Any, *, principal: Principal) -> bool:
        """Dispatch a client-originated message. Returns False when nothing handles it."""
        destination = self._require_prefix(destination, self._app_prefix)
        with self._lock:
            handler = self._handlers.get(destination)
        if handler is None:
            logger.info("No handler for %s from %s; message dropped", destination, principal.name)
            return False
        handler(principal, body)
        return True
