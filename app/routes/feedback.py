"""
Feedback API Route

Description:
This module defines a FastAPI route for scoring a finished interview transcript
and storing the feedback report.

Arguments:
- feedback_request: An instance of CreateFeedbackRequest containing the transcript.

Returns:
- An instance of FeedbackResult. Failures are reported as success=false, never as an error status.

Dependencies:
- fastapi: For creating the route and dependency injection.
- app.services.feedback.feedback_service: For feedback generation.
- loguru: For logging.

Author: @kcaparas1630

"""
from fastapi import APIRouter, Depends
from app.core.llm_provider import LLMProvider, get_feedback_llm
from app.database import get_db
from app.schemas.feedback.feedback import CreateFeedbackRequest, FeedbackResult
from app.services.feedback.feedback_service import FeedbackService
from loguru import logger

router = APIRouter(
    prefix="/api",
    tags=["feedback"],
    responses={404: {"description": "Not found"}}
)


@router.post("/feedback", response_model=FeedbackResult)
async def create_feedback(
    feedback_request: CreateFeedbackRequest,
    db = Depends(get_db),
    llm: LLMProvider = Depends(get_feedback_llm)
):
    logger.info(f"Feedback requested for interview {feedback_request.interviewId}")
    service = FeedbackService(llm, db)
    return await service.create_feedback(feedback_request)
