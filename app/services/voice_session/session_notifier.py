"""
Session Notifier Module

The user-facing surface of a voice session: transient notifications, page
navigation and state snapshots. The base class discards everything; the
WebSocket notifier turns each call into a message on the session socket.

Author: @kcaparas1630
"""

from starlette.websockets import WebSocket
from app.schemas.voice.voice_session import VoiceServerMessage, VoiceSessionState
from app.services.voice_session.voice_client import timestamp


class SessionNotifier:
    async def notify(self, level: str, message: str) -> None:
        """Show a transient notice. level is one of loading, success, error."""
        pass

    async def navigate(self, path: str) -> None:
        pass

    async def publish_state(self, state: VoiceSessionState) -> None:
        pass


class WebSocketSessionNotifier(SessionNotifier):
    def __init__(self, websocket: WebSocket):
        self.websocket = websocket

    async def _send(self, message_type: str, content) -> None:
        await self.websocket.send_json(VoiceServerMessage(
            type=message_type,
            content=content,
            timestamp=timestamp()
        ).model_dump(mode="json"))

    async def notify(self, level: str, message: str) -> None:
        await self._send("notification", {"level": level, "message": message})

    async def navigate(self, path: str) -> None:
        await self._send("navigate", {"path": path})

    async def publish_state(self, state: VoiceSessionState) -> None:
        await self._send("state", state.model_dump(mode="json"))
