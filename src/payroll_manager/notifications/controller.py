from __future__ import annotations

import json

from flask import Flask
from flask_sock import Sock
from simple_websocket import ConnectionClosed

from ..container import Container
from ..core.constants import WEBSOCKET_ENDPOINT
from ..security.web import principal_required
from .session import ChannelSession

POLL_INTERVAL_SECONDS = 0.25


def register(app: Flask, container: Container, sock: Sock) -> None:
    @sock.route(WEBSOCKET_ENDPOINT)
    @principal_required
    def payroll_socket(ws, principal):
        session = ChannelSession(container.notifications, principal)
        try:
            while True:
                raw = ws.receive(timeout=POLL_INTERVAL_SECONDS)
                if raw is not None:
                    for frame in session.handle(raw):
                        ws.send(json.dumps(frame))
                for frame in session.pending():
                    ws.send(json.dumps(frame))
        except ConnectionClosed:
            pass
        finally:
            session.close()
