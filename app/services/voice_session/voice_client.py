"""
Voice Client Module

Adapter over the voice vendor SDK. The vendor's web SDK runs in the browser;
this module only needs the two commands the session issues (start, stop) and
a listener registry for the call events the SDK delivers.

The module contains:
- VoiceClient: listener registry plus the abstract start/stop commands
- WebSocketVoiceClient: forwards commands to the browser over the session socket

Dependencies:
- starlette.websockets: For the session socket.
- loguru: For logging operations.
- app.schemas.voice.voice_session: For outbound message envelopes.

Author: @kcaparas1630
"""

import time
from collections import defaultdict
from typing import Any, Awaitable, Callable, Dict, List, Union
from starlette.websockets import WebSocket
from loguru import logger
from app.schemas.voice.voice_session import VoiceServerMessage

Listener = Callable[[Any], Awaitable[None]]

# Vendor events the session listens to
VENDOR_EVENTS = ("call-start", "call-end", "message", "speech-start", "speech-end", "error")


def timestamp() -> str:
    return str(int(time.time() * 1000))


class VoiceClient:
    """
    Base voice client.

    Events are delivered in order, one at a time; `emit` awaits each listener
    before calling the next.
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = defaultdict(list)

    def on(self, event: str, listener: Listener) -> None:
        self._listeners[event].append(listener)

    def off(self, event: str, listener: Listener) -> None:
        if listener in self._listeners.get(event, []):
            self._listeners[event].remove(listener)

    async def emit(self, event: str, payload: Any = None) -> None:
        if event not in VENDOR_EVENTS:
            logger.warning(f"Ignoring unknown voice event: {event}")
            return
        for listener in list(self._listeners.get(event, [])):
            await listener(payload)

    async def start(self, assistant: Union[str, dict], variable_values: dict) -> None:
        """
        Start a call.

        Args:
            assistant: A hosted workflow id, or a full assistant definition
            variable_values: Template variables for the assistant/workflow
        """
        raise NotImplementedError

    async def stop(self) -> None:
        raise NotImplementedError


class WebSocketVoiceClient(VoiceClient):
    """Voice client whose SDK lives in the browser at the other end of the socket."""

    def __init__(self, websocket: WebSocket):
        super().__init__()
        self.websocket = websocket

    async def start(self, assistant: Union[str, dict], variable_values: dict) -> None:
        logger.info("Sending start_call to voice client")
        await self.websocket.send_json(VoiceServerMessage(
            type="start_call",
            content={"assistant": assistant, "variableValues": variable_values},
            timestamp=timestamp()
        ).model_dump())

    async def stop(self) -> None:
        logger.info("Sending stop_call to voice client")
        await self.websocket.send_json(VoiceServerMessage(
            type="stop_call",
            timestamp=timestamp()
        ).model_dump())
