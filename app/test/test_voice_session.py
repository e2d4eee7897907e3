"""
Test Voice Session Module

Drives VoiceSession through vendor events on a fake voice client and checks the
call status, transcript, notifications and the feedback hand-off.

Dependencies:
- pytest: For testing framework
- pytest-asyncio: For async test support
- app.services.voice_session.voice_session: The module being tested

Author: @kcaparas1630
"""

import pytest
from app.constants.interviewer import INTERVIEWER_ASSISTANT
from app.errors.exceptions import InvalidCallTransition
from app.schemas.feedback.feedback import FeedbackResult
from app.schemas.voice.voice_session import CallEvent, CallStatus, SessionType, VoiceSessionConfig
from app.services.voice_session.voice_session import VoiceSession, next_status

QUESTIONS = ["Tell me about yourself.", "What is your biggest strength?"]

def transcript(role: str, text: str, transcript_type: str = "final") -> dict:
    return {"type": "transcript", "transcriptType": transcript_type, "role": role, "transcript": text}

class FeedbackRecorder:
    """Stands in for FeedbackService.create_feedback."""

    def __init__(self, result: FeedbackResult = None, error: Exception = None):
        self.result = result or FeedbackResult(success=True, feedbackId="feedback-1")
        self.error = error
        self.requests = []

    async def __call__(self, feedback_request):
        self.requests.append(feedback_request)
        if self.error:
            raise self.error
        return self.result

def make_session(voice_client, notifier, feedback=None, **config) -> VoiceSession:
    values = {"userName": "Ada", "userId": "user-1", "type": SessionType.INTERVIEW,
              "interviewId": "interview-1", "questions": QUESTIONS}
    values.update(config)
    session = VoiceSession(VoiceSessionConfig(**values), voice_client, notifier,
                           feedback_generator=feedback or FeedbackRecorder())
    session.attach()
    return session

class TestTransitionTable:

    @pytest.mark.parametrize("status, event, expected", [
        (CallStatus.INACTIVE, CallEvent.START, CallStatus.CONNECTING),
        (CallStatus.FINISHED, CallEvent.START, CallStatus.CONNECTING),
        (CallStatus.CONNECTING, CallEvent.CALL_START, CallStatus.ACTIVE),
        (CallStatus.ACTIVE, CallEvent.CALL_END, CallStatus.FINISHED),
        (CallStatus.CONNECTING, CallEvent.STOP, CallStatus.FINISHED),
        (CallStatus.ACTIVE, CallEvent.ERROR, CallStatus.INACTIVE),
        (CallStatus.FINISHED, CallEvent.ERROR, CallStatus.INACTIVE),
    ])
    def test_allowed(self, status, event, expected):
        assert next_status(status, event) == expected

    @pytest.mark.parametrize("status, event", [
        (CallStatus.ACTIVE, CallEvent.START),
        (CallStatus.CONNECTING, CallEvent.START),
        (CallStatus.INACTIVE, CallEvent.CALL_START),
        (CallStatus.INACTIVE, CallEvent.STOP),
        (CallStatus.FINISHED, CallEvent.CALL_END),
    ])
    def test_rejected(self, status, event):
        assert next_status(status, event) is None

class TestStartAndStop:

    @pytest.mark.asyncio
    async def test_start_connects_interviewer(self, voice_client, notifier):
        session = make_session(voice_client, notifier)

        await session.start()

        assert session.status == CallStatus.CONNECTING
        assert notifier.notices[0] == ("loading", "Connecting to AI Interviewer...")
        assistant, variables = voice_client.started[0]
        assert assistant == INTERVIEWER_ASSISTANT
        assert variables == {
            "questions": "- Tell me about yourself.\n- What is your biggest strength?",
            "context": "",
        }

    @pytest.mark.asyncio
    async def test_start_twice_is_rejected(self, voice_client, notifier):
        session = make_session(voice_client, notifier)
        await session.start()

        with pytest.raises(InvalidCallTransition):
            await session.start()
        assert len(voice_client.started) == 1

    @pytest.mark.asyncio
    async def test_stop_without_call_is_rejected(self, voice_client, notifier):
        session = make_session(voice_client, notifier)

        with pytest.raises(InvalidCallTransition):
            await session.stop()
        assert voice_client.stopped == 0

    @pytest.mark.asyncio
    async def test_vendor_confirms_call(self, voice_client, notifier):
        session = make_session(voice_client, notifier)
        await session.start()

        await voice_client.emit("call-start")

        assert session.status == CallStatus.ACTIVE
        assert notifier.states[-1].callStatus == CallStatus.ACTIVE

    @pytest.mark.asyncio
    async def test_stray_call_start_is_ignored(self, voice_client, notifier):
        session = make_session(voice_client, notifier)

        await voice_client.emit("call-start")

        assert session.status == CallStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_start_failure_returns_to_inactive(self, voice_client, notifier):
        voice_client.fail_start = True
        session = make_session(voice_client, notifier)

        await session.start()

        assert session.status == CallStatus.INACTIVE
        assert session.error == "vendor unreachable"
        assert notifier.notices[-1][0] == "error"

    @pytest.mark.asyncio
    async def test_custom_session_sends_context(self, voice_client, notifier):
        session = make_session(voice_client, notifier, type=SessionType.CUSTOM,
                               resume="Rust systems engineer", jobDescription="Embedded platform lead")

        await session.start()

        _, variables = voice_client.started[0]
        assert "Rust systems engineer" in variables["context"]
        assert "Embedded platform lead" in variables["context"]

    def test_interview_requires_interview_id(self, voice_client, notifier):
        with pytest.raises(ValueError):
            VoiceSession(VoiceSessionConfig(userName="Ada", userId="user-1"), voice_client, notifier,
                         feedback_generator=FeedbackRecorder())

class TestTranscript:

    @pytest.mark.asyncio
    async def test_only_final_transcripts_are_kept(self, voice_client, notifier):
        session = make_session(voice_client, notifier)
        await session.start()
        await voice_client.emit("call-start")

        await voice_client.emit("message", transcript("assistant", "Tell me about yourself."))
        await voice_client.emit("message", transcript("user", "I am a back", "partial"))
        await voice_client.emit("message", {"type": "function-call"})
        await voice_client.emit("message", transcript("user", "I am a backend engineer."))

        assert [message.content for message in session.messages] == [
            "Tell me about yourself.",
            "I am a backend engineer.",
        ]
        assert session.last_message == "I am a backend engineer."
        assert session.state().messageCount == 2

    @pytest.mark.asyncio
    async def test_speech_events_toggle_speaking(self, voice_client, notifier):
        session = make_session(voice_client, notifier)
        await session.start()

        await voice_client.emit("speech-start")
        assert session.is_speaking is True
        await voice_client.emit("speech-end")
        assert session.is_speaking is False

    @pytest.mark.asyncio
    async def test_messages_after_finish_are_dropped(self, voice_client, notifier):
        session = make_session(voice_client, notifier)
        await session.start()
        await voice_client.emit("message", transcript("user", "Hello there."))
        await voice_client.emit("call-end")

        await voice_client.emit("message", transcript("user", "Late message."))

        assert session.last_message == "Hello there."

    @pytest.mark.asyncio
    async def test_restart_clears_transcript(self, voice_client, notifier):
        session = make_session(voice_client, notifier)
        await session.start()
        await voice_client.emit("message", transcript("user", "First attempt."))
        await voice_client.emit("call-end")

        await session.start()

        assert session.status == CallStatus.CONNECTING
        assert session.messages == []

class TestCompletion:

    @pytest.mark.asyncio
    async def test_call_end_generates_feedback_once(self, voice_client, notifier):
        feedback = FeedbackRecorder()
        session = make_session(voice_client, notifier, feedback=feedback, feedbackId="feedback-1")
        await session.start()
        await voice_client.emit("call-start")
        await voice_client.emit("message", transcript("assistant", "Tell me about yourself."))
        await voice_client.emit("message", transcript("user", "I build APIs."))

        await voice_client.emit("call-end")
        await voice_client.emit("call-end")

        assert session.status == CallStatus.FINISHED
        assert len(feedback.requests) == 1
        request = feedback.requests[0]
        assert request.interviewId == "interview-1"
        assert request.userId == "user-1"
        assert request.feedbackId == "feedback-1"
        assert [message.role for message in request.transcript] == ["assistant", "user"]
        assert notifier.paths == ["/interview/interview-1/feedback"]

    @pytest.mark.asyncio
    async def test_stop_ends_call_and_generates_feedback(self, voice_client, notifier):
        feedback = FeedbackRecorder()
        session = make_session(voice_client, notifier, feedback=feedback)
        await session.start()
        await voice_client.emit("call-start")
        await voice_client.emit("message", transcript("user", "I build APIs."))

        await session.stop()
        await voice_client.emit("call-end")

        assert session.status == CallStatus.FINISHED
        assert voice_client.stopped == 1
        assert len(feedback.requests) == 1

    @pytest.mark.asyncio
    async def test_empty_transcript_skips_feedback(self, voice_client, notifier):
        feedback = FeedbackRecorder()
        session = make_session(voice_client, notifier, feedback=feedback)
        await session.start()
        await voice_client.emit("call-start")

        await voice_client.emit("call-end")

        assert feedback.requests == []
        assert notifier.paths == ["/"]

    @pytest.mark.asyncio
    async def test_feedback_failure_navigates_home(self, voice_client, notifier):
        feedback = FeedbackRecorder(result=FeedbackResult(success=False))
        session = make_session(voice_client, notifier, feedback=feedback)
        await session.start()
        await voice_client.emit("message", transcript("user", "I build APIs."))

        await voice_client.emit("call-end")

        assert notifier.notices[-1] == ("error", "Failed to generate feedback")
        assert notifier.paths == ["/"]

    @pytest.mark.asyncio
    async def test_feedback_exception_navigates_home(self, voice_client, notifier):
        feedback = FeedbackRecorder(error=RuntimeError("boom"))
        session = make_session(voice_client, notifier, feedback=feedback)
        await session.start()
        await voice_client.emit("message", transcript("user", "I build APIs."))

        await voice_client.emit("call-end")

        assert notifier.paths == ["/"]

    @pytest.mark.asyncio
    async def test_vendor_error_forces_inactive(self, voice_client, notifier):
        feedback = FeedbackRecorder()
        session = make_session(voice_client, notifier, feedback=feedback)
        await session.start()
        await voice_client.emit("call-start")

        await voice_client.emit("error", {"message": "Meeting ended due to ejection"})

        assert session.status == CallStatus.INACTIVE
        assert session.error == "Meeting ended due to ejection"
        assert notifier.notices[-1] == ("error", "Call error: Meeting ended due to ejection")
        assert feedback.requests == []

        await session.start()
        assert session.status == CallStatus.CONNECTING

class TestGenerateSession:

    @pytest.mark.asyncio
    async def test_starts_workflow(self, voice_client, notifier, monkeypatch):
        monkeypatch.setenv("VAPI_WORKFLOW_ID", "workflow-123")
        session = make_session(voice_client, notifier, type=SessionType.GENERATE, interviewId=None, questions=None)

        await session.start()

        assert voice_client.started == [("workflow-123", {"username": "Ada", "userid": "user-1"})]

    @pytest.mark.asyncio
    async def test_missing_workflow_id_fails_start(self, voice_client, notifier, monkeypatch):
        monkeypatch.delenv("VAPI_WORKFLOW_ID", raising=False)
        session = make_session(voice_client, notifier, type=SessionType.GENERATE, interviewId=None, questions=None)

        await session.start()

        assert session.status == CallStatus.INACTIVE
        assert voice_client.started == []
        assert "VAPI_WORKFLOW_ID" in session.error

    @pytest.mark.asyncio
    async def test_end_navigates_home_without_feedback(self, voice_client, notifier, monkeypatch):
        monkeypatch.setenv("VAPI_WORKFLOW_ID", "workflow-123")
        feedback = FeedbackRecorder()
        session = make_session(voice_client, notifier, feedback=feedback, type=SessionType.GENERATE,
                               interviewId=None, questions=None)
        await session.start()
        await voice_client.emit("call-start")
        await voice_client.emit("message", transcript("user", "Frontend, junior, five questions."))

        await voice_client.emit("call-end")

        assert feedback.requests == []
        assert ("success", "Interview questions generated!") in notifier.notices
        assert notifier.paths == ["/"]

@pytest.mark.asyncio
async def test_detached_session_ignores_vendor_events(voice_client, notifier):
    feedback = FeedbackRecorder()
    session = make_session(voice_client, notifier, feedback=feedback)
    await session.start()
    await voice_client.emit("call-start")

    session.detach()
    await voice_client.emit("message", transcript("user", "This arrives after detach."))
    await voice_client.emit("call-end")

    assert session.status == CallStatus.ACTIVE
    assert session.messages == []
    assert feedback.requests == []
