from __future__ import annotations

import json
import logging
from typing import Any, Dict, List

from ..core.exceptions import ValidationError
from ..security.principal import Principal
from .channel import NotificationChannel, Subscription

logger = logging.getLogger(__name__)

SUBSCRIBE = "SUBSCRIBE"
UNSUBSCRIBE = "UNSUBSCRIBE"
SEND = "SEND"
MESSAGE = "MESSAGE"
RECEIPT = "RECEIPT"
ERROR = "ERROR"


def _error(message: str) -> Dict[str, Any]:
    return {"command": ERROR, "message": message}


class ChannelSession:
    """One client connection's view of the notification channel.

    Frames are JSON objects with a `command` and a `destination`. The session
    owns its subscriptions and must be closed when the connection ends.
    """

    def __init__(self, channel: NotificationChannel, principal: Principal):
        self._channel = channel
        self._principal = principal
        self._subscriptions: Dict[str, Subscription] = {}

    @property
    def destinations(self) -> List[str]:
        return list(self._subscriptions)

    def handle(self, raw: str) -> List[Dict[str, Any]]:
        """Apply one client frame; returns the frames to send back."""
        try:
            frame = json.loads(raw)
        except (TypeError, ValueError):
            return [_error("Frame must be a JSON object")]
        if not isinstance(frame, dict):
            return [_error("Frame must be a JSON object")]

        command = str(frame.get("command", "")).upper()
        destination = frame.get("destination")
        if not isinstance(destination, str):
            return [_error("Frame needs a destination")]
        try:
            if command == SUBSCRIBE:
                if destination not in self._subscriptions:
                    self._subscriptions[destination] = self._channel.subscribe(destination)
                return [{"command": RECEIPT, "destination": destination}]
            if command == UNSUBSCRIBE:
                subscription = self._subscriptions.pop(destination, None)
                if subscription is not None:
                    self._channel.close(subscription)
                return [{"command": RECEIPT, "destination": destination}]
            if command == SEND:
                self._channel.send(destination, frame.get("body"), principal=self._principal)
                return []
        except ValidationError as e:
            return [_error(str(e))]

        return [_error(f"Unknown command {command!r}")]

    def pending(self) -> List[Dict[str, Any]]:
        out: List[Dict[str, Any]] = []
        for subscription in self._subscriptions.values():
            for message in subscription.drain():
                out.append({"command": MESSAGE, "destination": message.destination, "body": message.body})
        return out

    def close(self) -> None:
        for subscription in self._subscriptions.values():
            self._channel.close(subscription)
        self._subscriptions.clear()
        logger.debug("Closed channel session for %s", self._principal.name)
