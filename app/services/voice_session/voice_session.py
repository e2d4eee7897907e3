"""
Voice Session Module

This module runs a single voice interview call. It owns the call state machine,
the transcript collected during the call, and the hand-off to feedback
generation when the call ends.

State machine (CallEvent -> new CallStatus):

    INACTIVE/FINISHED --start------> CONNECTING
    CONNECTING ------call-start----> ACTIVE
    CONNECTING/ACTIVE --call-end---> FINISHED
    CONNECTING/ACTIVE --stop-------> FINISHED
    any state ---------error-------> INACTIVE

Illegal user actions raise InvalidCallTransition; illegal vendor events are
logged and ignored. Reaching FINISHED triggers the completion step at most once
per call.

Dependencies:
- loguru: For logging operations.
- pydantic: For transcript message validation.
- app.services.voice_session.voice_client: For the vendor adapter.
- app.services.voice_session.session_notifier: For the user-facing surface.

Author: @kcaparas1630
"""

import os
from typing import Awaitable, Callable, List, Optional, Tuple, Union
from loguru import logger
from pydantic import ValidationError
from app.constants.interviewer import INTERVIEWER_ASSISTANT
from app.core.prompt_manager import prompt_manager, format_questions
from app.errors.exceptions import InvalidCallTransition, MissingConfigurationError
from app.schemas.feedback.feedback import CreateFeedbackRequest, FeedbackResult
from app.schemas.voice.saved_message import SavedMessage
from app.schemas.voice.voice_session import CallEvent, CallStatus, SessionType, VoiceSessionConfig, VoiceSessionState
from app.services.voice_session.session_notifier import SessionNotifier
from app.services.voice_session.voice_client import VoiceClient

FeedbackGenerator = Callable[[CreateFeedbackRequest], Awaitable[FeedbackResult]]

TRANSITIONS = {
    (CallStatus.INACTIVE, CallEvent.START): CallStatus.CONNECTING,
    (CallStatus.FINISHED, CallEvent.START): CallStatus.CONNECTING,
    (CallStatus.CONNECTING, CallEvent.CALL_START): CallStatus.ACTIVE,
    (CallStatus.CONNECTING, CallEvent.CALL_END): CallStatus.FINISHED,
    (CallStatus.ACTIVE, CallEvent.CALL_END): CallStatus.FINISHED,
    (CallStatus.CONNECTING, CallEvent.STOP): CallStatus.FINISHED,
    (CallStatus.ACTIVE, CallEvent.STOP): CallStatus.FINISHED,
}

HOME_PATH = "/"


def next_status(status: CallStatus, event: CallEvent) -> Optional[CallStatus]:
    """Return the status `event` leads to from `status`, or None if the event is not allowed."""
    if event == CallEvent.ERROR:
        return CallStatus.INACTIVE
    return TRANSITIONS.get((status, event))


class VoiceSession:
    """
    One voice interview call between a candidate and the AI interviewer.

    Args:
        config: Who the call is for and what it should ask
        client: Vendor adapter used to start/stop the call and to receive its events
        notifier: Where notices, navigation and state snapshots go
        feedback_generator: Called with the transcript when an interview call finishes
    """

    def __init__(self, config: VoiceSessionConfig, client: VoiceClient, notifier: SessionNotifier,
                 feedback_generator: Optional[FeedbackGenerator] = None):
        if config.type != SessionType.GENERATE and not config.interviewId:
            raise ValueError("interviewId is required for interview sessions")
        if config.type != SessionType.GENERATE and feedback_generator is None:
            raise ValueError("feedback_generator is required for interview sessions")

        self.config = config
        self.client = client
        self.notifier = notifier
        self.feedback_generator = feedback_generator

        self.status = CallStatus.INACTIVE
        self.messages: List[SavedMessage] = []
        self.is_speaking = False
        self.error: Optional[str] = None
        self._completed = False

        self._handlers = {
            "call-start": self._on_call_start,
            "call-end": self._on_call_end,
            "message": self._on_message,
            "speech-start": self._on_speech_start,
            "speech-end": self._on_speech_end,
            "error": self._on_error,
        }

    def attach(self) -> None:
        """Register the session's listeners on the voice client."""
        for event, handler in self._handlers.items():
            self.client.on(event, handler)

    def detach(self) -> None:
        for event, handler in self._handlers.items():
            self.client.off(event, handler)

    @property
    def last_message(self) -> str:
        return self.messages[-1].content if self.messages else ""

    def state(self) -> VoiceSessionState:
        return VoiceSessionState(
            callStatus=self.status,
            isSpeaking=self.is_speaking,
            lastMessage=self.last_message,
            messageCount=len(self.messages),
            error=self.error
        )

    def _transition(self, event: CallEvent) -> bool:
        new_status = next_status(self.status, event)
        if new_status is None:
            return False
        logger.info(f"Call status {self.status.value} -> {new_status.value} on {event.value}")
        self.status = new_status
        return True

    async def _publish(self) -> None:
        await self.notifier.publish_state(self.state())

    def _build_call(self) -> Tuple[Union[str, dict], dict]:
        """Pick the assistant and variables for this session type."""
        if self.config.type == SessionType.GENERATE:
            workflow_id = os.getenv("VAPI_WORKFLOW_ID")
            if not workflow_id:
                raise MissingConfigurationError("VAPI_WORKFLOW_ID")
            logger.info(f"Starting generation call for user {self.config.userId}")
            return workflow_id, {
                "username": self.config.userName,
                "userid": self.config.userId,
            }

        questions = self.config.questions or []
        if not questions:
            logger.warning("No questions provided for interview")

        context = ""
        if self.config.type == SessionType.CUSTOM and self.config.resume and self.config.jobDescription:
            context = prompt_manager.get_interview_context(self.config.resume, self.config.jobDescription)

        logger.info(f"Starting interview call with {len(questions)} questions")
        return INTERVIEWER_ASSISTANT, {
            "questions": format_questions(questions),
            "context": context,
        }

    async def start(self) -> None:
        """
        User action: start a call.

        Raises:
            InvalidCallTransition: If a call is already connecting or active
        """
        if not self._transition(CallEvent.START):
            raise InvalidCallTransition(self.status.value, CallEvent.START.value)

        self.messages = []
        self.is_speaking = False
        self.error = None
        self._completed = False
        await self.notifier.notify("loading", "Connecting to AI Interviewer...")
        await self._publish()

        try:
            assistant, variable_values = self._build_call()
            await self.client.start(assistant, variable_values)
        except Exception as e:
            logger.error(f"Error starting call: {e}")
            await self._fail(f"Failed to start call: {e}", str(e))

    async def stop(self) -> None:
        """
        User action: end the call now.

        Raises:
            InvalidCallTransition: If no call is connecting or active
        """
        if not self._transition(CallEvent.STOP):
            raise InvalidCallTransition(self.status.value, CallEvent.STOP.value)
        await self._publish()

        try:
            await self.client.stop()
        except Exception as e:
            logger.error(f"Error stopping call: {e}")
            await self.notifier.notify("error", f"Error ending call: {e}")

        await self._complete()

    async def _fail(self, notice: str, error: str) -> None:
        self.error = error
        self.is_speaking = False
        self._transition(CallEvent.ERROR)
        await self.notifier.notify("error", notice)
        await self._publish()

    async def _on_call_start(self, payload=None) -> None:
        if not self._transition(CallEvent.CALL_START):
            logger.warning(f"Ignoring call-start while {self.status.value}")
            return
        self.error = None
        await self._publish()

    async def _on_call_end(self, payload=None) -> None:
        if not self._transition(CallEvent.CALL_END):
            logger.debug(f"Ignoring call-end while {self.status.value}")
            return
        self.is_speaking = False
        await self._publish()
        await self._complete()

    async def _on_message(self, message) -> None:
        if not isinstance(message, dict):
            return
        if message.get("type") != "transcript" or message.get("transcriptType") != "final":
            return
        if self.status not in (CallStatus.CONNECTING, CallStatus.ACTIVE):
            logger.debug(f"Dropping transcript received while {self.status.value}")
            return
        try:
            saved = SavedMessage(role=message.get("role"), content=message.get("transcript", ""))
        except ValidationError as e:
            logger.warning(f"Skipping malformed transcript message: {e}")
            return
        self.messages.append(saved)
        await self._publish()

    async def _on_speech_start(self, payload=None) -> None:
        self.is_speaking = True
        await self._publish()

    async def _on_speech_end(self, payload=None) -> None:
        self.is_speaking = False
        await self._publish()

    async def _on_error(self, error) -> None:
        if isinstance(error, dict):
            message = error.get("message") or str(error)
        else:
            message = str(error) if error else "Unknown voice error"
        logger.error(f"Voice vendor error: {message}")
        await self._fail(f"Call error: {message}", message)

    async def _complete(self) -> None:
        """Run once per finished call: navigate home or hand the transcript to feedback."""
        if self._completed:
            return
        self._completed = True

        if self.config.type == SessionType.GENERATE:
            await self.notifier.notify("success", "Interview questions generated!")
            await self.notifier.navigate(HOME_PATH)
            return

        if not self.messages:
            await self.notifier.notify("error", "No interview transcript to generate feedback from")
            await self.notifier.navigate(HOME_PATH)
            return

        await self._generate_feedback()

    async def _generate_feedback(self) -> None:
        logger.info(f"Generating feedback from transcript of {len(self.messages)} messages")
        result: Optional[FeedbackResult] = None
        try:
            result = await self.feedback_generator(CreateFeedbackRequest(
                interviewId=self.config.interviewId,
                userId=self.config.userId,
                transcript=list(self.messages),
                feedbackId=self.config.feedbackId,
                resume=self.config.resume,
                jobDescription=self.config.jobDescription
            ))
        except Exception as e:
            logger.error(f"Error in feedback generation: {e}")

        if result is not None and result.success and result.feedbackId:
            await self.notifier.notify("success", "Feedback generated successfully!")
            await self.notifier.navigate(f"/interview/{self.config.interviewId}/feedback")
        else:
            logger.error("Error saving feedback")
            await self.notifier.notify("error", "Failed to generate feedback")
            await self.notifier.navigate(HOME_PATH)
