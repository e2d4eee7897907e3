"""
WebSocket route for voice interview sessions

Description:
This module defines the WebSocket route the browser opens for a voice call.
The browser hosts the vendor web SDK and relays its events over this socket;
the server drives the call state machine, collects the transcript and
generates feedback when the call ends.

Arguments:
- websocket: WebSocket connection object

Returns:
- None, but sends state, notification and navigation messages through the WebSocket connection.

Dependencies:
- fastapi: For WebSocket routing and dependency injection.
- app.services.voice_session.handle_voice_websocket: For the session loop.
- loguru: For logging information about the WebSocket connection and any exceptions that occur.
Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from app.core.llm_provider import LLMProvider, get_feedback_llm
from app.database import get_db
from app.services.feedback.feedback_service import FeedbackService
from app.services.voice_session.handle_voice_websocket import handle_voice_websocket
from loguru import logger

router = APIRouter(
    prefix="/api",
    tags=["voice-session"],
    responses={404: {"description": "Not found"}}
)

@router.websocket("/voice/ws")
async def voice_websocket_endpoint(
    websocket: WebSocket,
    db = Depends(get_db),
    llm: LLMProvider = Depends(get_feedback_llm)
):
    await websocket.accept()
    logger.info("WebSocket connected for voice session")
    try:
        await handle_voice_websocket(websocket, db, FeedbackService(llm, db))
    except WebSocketDisconnect:
        logger.info("WebSocket connection closed")
    except Exception as e:
        logger.exception("Unhandled exception in voice websocket connection")
        #1011 = internal error
        await websocket.close(code=1011, reason=str(e)[:123])
