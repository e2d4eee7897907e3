"""
Voice WebSocket Handler Utility Module

This module handles the lifecycle of a voice session socket. The browser hosts
the vendor web SDK; this socket carries the session's commands to it and the
SDK's events back.

Client -> server messages:
- {"type": "init", "content": VoiceSessionConfig}   must be first
- {"type": "start_call"} / {"type": "stop_call"}
- {"type": "vapi_event", "event": "...", "payload": ...}
- {"type": "ping"} / {"type": "heartbeat"}

Server -> client messages are VoiceServerMessage envelopes: state,
notification, navigate, start_call, stop_call, error and heartbeat.

Dependencies:
- json: For decoding inbound frames.
- starlette.websockets: For WebSocket connection handling.
- loguru: For logging operations.
- pydantic: For inbound message validation.
- app.services.voice_session.voice_session: For the call state machine.
- app.services.interviews.interview_queries: For loading stored interview questions.

Author: @kcaparas1630
"""

import json
from typing import Optional
from starlette.websockets import WebSocket, WebSocketDisconnect
from loguru import logger
from pydantic import ValidationError
from app.errors.exceptions import InvalidCallTransition
from app.schemas.voice.voice_session import SessionType, VoiceClientMessage, VoiceServerMessage, VoiceSessionConfig
from app.services.feedback.feedback_service import FeedbackService
from app.services.interviews.interview_queries import get_interview_by_id
from app.services.voice_session.session_notifier import WebSocketSessionNotifier
from app.services.voice_session.voice_client import WebSocketVoiceClient, timestamp
from app.services.voice_session.voice_session import VoiceSession


async def send_error_message(websocket: WebSocket, error_message: str):
    """Send an error message to the WebSocket client."""
    await websocket.send_json(VoiceServerMessage(
        type="error",
        content=error_message,
        timestamp=timestamp()
    ).model_dump())


def load_session_config(db, config: VoiceSessionConfig) -> VoiceSessionConfig:
    """
    Fill questions, resume and job description from the stored interview when the
    client did not send them.

    Raises:
        ValueError: If the interview is required and does not exist
    """
    if config.type == SessionType.GENERATE or not config.interviewId:
        return config
    if config.questions and (config.type != SessionType.CUSTOM or (config.resume and config.jobDescription)):
        return config

    interview = get_interview_by_id(db, config.interviewId)
    if interview is None:
        raise ValueError(f"Interview '{config.interviewId}' not found.")

    logger.info(f"Loaded interview {config.interviewId} for voice session")
    return config.model_copy(update={
        "questions": config.questions or interview.get("questions", []),
        "resume": config.resume or interview.get("resume"),
        "jobDescription": config.jobDescription or interview.get("jobDescription"),
    })


async def _receive_message(websocket: WebSocket) -> Optional[VoiceClientMessage]:
    text = await websocket.receive_text()
    try:
        return VoiceClientMessage(**json.loads(text))
    except (json.JSONDecodeError, ValidationError, TypeError) as e:
        logger.warning(f"Invalid voice message: {e}")
        await send_error_message(websocket, "Invalid message format")
        return None


async def _initialize_session(websocket: WebSocket, db, feedback_service: FeedbackService) -> Optional[VoiceSession]:
    message = await _receive_message(websocket)
    if message is None:
        return None
    if message.type != "init" or not message.content:
        await send_error_message(websocket, "First message must be an init message")
        return None

    try:
        config = load_session_config(db, VoiceSessionConfig(**message.content))
        session = VoiceSession(
            config,
            WebSocketVoiceClient(websocket),
            WebSocketSessionNotifier(websocket),
            feedback_generator=feedback_service.create_feedback
        )
    except (ValidationError, ValueError) as e:
        logger.warning(f"Invalid voice session config: {e}")
        await send_error_message(websocket, f"Invalid session config: {e}")
        return None

    logger.info(f"Voice session initialized for user {config.userId} ({config.type.value})")
    return session


async def handle_voice_websocket(websocket: WebSocket, db, feedback_service: FeedbackService):
    """
    Run a voice session over an accepted WebSocket until the client disconnects.

    Args:
        websocket: Accepted WebSocket connection
        db: Firestore client
        feedback_service: Used to score the transcript when the call finishes
    """
    session: Optional[VoiceSession] = None
    try:
        while session is None:
            session = await _initialize_session(websocket, db, feedback_service)

        session.attach()
        await session.notifier.publish_state(session.state())

        while True:
            message = await _receive_message(websocket)
            if message is None:
                continue

            try:
                if message.type == "start_call":
                    await session.start()
                elif message.type == "stop_call":
                    await session.stop()
                elif message.type == "vapi_event":
                    if not message.event:
                        await send_error_message(websocket, "Missing 'event' field")
                        continue
                    await session.client.emit(message.event, message.payload)
                elif message.type in ("ping", "heartbeat"):
                    await websocket.send_json(VoiceServerMessage(
                        type="heartbeat",
                        timestamp=timestamp()
                    ).model_dump())
                else:
                    await send_error_message(websocket, "Session already initialized")
            except InvalidCallTransition as e:
                logger.warning(str(e))
                await send_error_message(websocket, str(e))

    except WebSocketDisconnect:
        logger.info("Voice WebSocket disconnected")
    finally:
        if session is not None:
            session.detach()
