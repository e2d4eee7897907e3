"""
Voice Session Schemas

This module defines typed schemas for the voice interview session: the call
state machine's states and events, the session configuration sent by the
client when it opens the session socket, and the WebSocket message envelopes.

Dependencies:
- pydantic: For data validation and serialization
- typing: For type hints

Author: @kcaparas1630
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional


class CallStatus(str, Enum):
    """Lifecycle of a single voice call."""
    INACTIVE = "INACTIVE"
    CONNECTING = "CONNECTING"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class CallEvent(str, Enum):
    """Events that move a call between states."""
    START = "start"            # user pressed call
    CALL_START = "call-start"  # vendor confirmed the call is live
    CALL_END = "call-end"      # vendor ended the call
    STOP = "stop"              # user pressed end
    ERROR = "error"            # vendor reported an error


class SessionType(str, Enum):
    """What the call is for."""
    GENERATE = "generate"
    INTERVIEW = "interview"
    CUSTOM = "custom"


class VoiceSessionConfig(BaseModel):
    """Session configuration sent with the socket's init message."""
    userName: str = Field(..., description="Name the interviewer greets the candidate with")
    userId: str = Field(..., description="Owner of the interview and feedback")
    type: SessionType = Field(default=SessionType.INTERVIEW)
    interviewId: Optional[str] = Field(default=None, description="Interview the transcript is scored against")
    feedbackId: Optional[str] = Field(default=None, description="Existing feedback document to overwrite")
    questions: Optional[List[str]] = Field(default=None, description="Questions to ask; loaded from the interview when omitted")
    resume: Optional[str] = None
    jobDescription: Optional[str] = None


class VoiceSessionState(BaseModel):
    """Snapshot of the session pushed to the client after every change."""
    callStatus: CallStatus
    isSpeaking: bool = False
    lastMessage: str = ""
    messageCount: int = 0
    error: Optional[str] = None


class VoiceClientMessage(BaseModel):
    """Inbound message from the browser."""
    type: Literal["init", "start_call", "stop_call", "vapi_event", "ping", "heartbeat"]
    content: Optional[Dict[str, Any]] = None
    event: Optional[str] = None
    payload: Optional[Any] = None


class VoiceServerMessage(BaseModel):
    """Outbound message to the browser."""
    type: Literal["state", "notification", "navigate", "start_call", "stop_call", "error", "heartbeat"]
    content: Any = None
    timestamp: str
