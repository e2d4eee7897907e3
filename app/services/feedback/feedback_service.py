"""
Feedback Service

This service scores a finished voice interview. It formats the transcript,
asks the feedback model for a structured report against the fixed five-category
rubric and stores the report in the feedback collection.

Unlike question generation there is no repair chain: a response that does not
satisfy the FeedbackAnalysis schema is a failure. Every failure is logged and
reported as FeedbackResult(success=False); create_feedback never raises.

Dependencies:
- loguru: For logging operations
- app.core.llm_provider: For structured generation
- app.core.prompt_manager: For the rubric prompt
"""

from loguru import logger
from app.core.llm_provider import LLMProvider
from app.core.prompt_manager import prompt_manager, format_transcript
from app.database import FEEDBACK_COLLECTION
from app.schemas.feedback.feedback import CreateFeedbackRequest, Feedback, FeedbackAnalysis, FeedbackResult


class FeedbackService:
    """
    Service for turning an interview transcript into a stored feedback report.
    """

    def __init__(self, llm: LLMProvider, db):
        """
        Initialize the feedback service.

        Args:
            llm: Model used for structured feedback generation.
            db: Firestore client.
        """
        self.llm = llm
        self.db = db

    async def create_feedback(self, feedback_request: CreateFeedbackRequest) -> FeedbackResult:
        """
        Generate and store feedback for a transcript.

        With a feedbackId the document feedback/{feedbackId} is overwritten;
        without one a new document is created on every call.

        Args:
            feedback_request: Interview id, user id, transcript and optional feedbackId

        Returns:
            FeedbackResult: success flag and the feedback document id
        """
        try:
            logger.info(f"Creating feedback for interview: {feedback_request.interviewId}")
            formatted_transcript = format_transcript(feedback_request.transcript)

            prompt = prompt_manager.get_feedback_prompt(
                formatted_transcript,
                resume=feedback_request.resume,
                job_description=feedback_request.jobDescription
            )
            analysis = await self.llm.generate_object(
                prompt,
                FeedbackAnalysis,
                system=prompt_manager.get_feedback_system_prompt()
            )

            feedback = Feedback(
                interviewId=feedback_request.interviewId,
                userId=feedback_request.userId,
                **analysis.model_dump()
            )

            collection = self.db.collection(FEEDBACK_COLLECTION)
            if feedback_request.feedbackId:
                feedback_ref = collection.document(feedback_request.feedbackId)
            else:
                feedback_ref = collection.document()

            feedback_ref.set(feedback.model_dump())
            logger.info(f"Feedback saved with ID: {feedback_ref.id} (total score {feedback.totalScore})")

            return FeedbackResult(success=True, feedbackId=feedback_ref.id)

        except Exception as e:
            logger.error(f"Error saving feedback: {e}")
            return FeedbackResult(success=False)
