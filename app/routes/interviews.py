"""
Interview API Routes

Description:
This module defines the FastAPI routes for creating interviews from a resume
and job description, and for reading stored interviews and their feedback.

Arguments:
- request: An instance of Request, required for rate limiting.
- generation_request: An instance of ResumeJobInterviewRequest.

Returns:
- InterviewGenerationResponse for generation; plain interview/feedback documents for reads.

Dependencies:
- fastapi: For creating routes and dependency injection.
- app.core.route_limiters: For rate limiting functionality.
- app.services.interviews: For generation and read queries.
- loguru: For logging information about the request and any errors that occur.

Author: @kcaparas1630

"""
from typing import List
from fastapi import APIRouter, Depends, Query, Request
from app.core.llm_provider import LLMProvider, get_question_llm
from app.core.route_limiters import limiter
from app.database import get_db
from app.errors.exceptions import GenerationFailed, QuestionGenerationError, InterviewNotFound, FeedbackNotFound, InternalServerError
from app.schemas.interview.interview_requests import ResumeJobInterviewRequest
from app.schemas.interview.interview_responses import InterviewGenerationResponse
from app.services.interviews.question_generation_service import QuestionGenerationService
from app.services.interviews import interview_queries
from loguru import logger

router = APIRouter(
    prefix="/api",
    tags=["interviews"],
    responses={404: {"description": "Not found"}}
)


@router.post("/interviews/resume-job", response_model=InterviewGenerationResponse)
@limiter.limit("5/minute")
async def generate_resume_job_interview(
    request: Request,
    generation_request: ResumeJobInterviewRequest,
    db = Depends(get_db),
    llm: LLMProvider = Depends(get_question_llm)
):
    """
    Generate tailored questions from a resume and job description and store the interview.
    Request parameter is required for rate limiting.
    """
    try:
        service = QuestionGenerationService(llm, db)
        return await service.generate_resume_job_interview(generation_request)
    except GenerationFailed:
        raise
    except Exception as e:
        logger.error(f"Error generating interview questions: {e}")
        raise QuestionGenerationError(str(e)) from e


@router.get("/interviews/latest")
async def get_latest_interviews(
    userId: str,
    limit: int = Query(default=interview_queries.DEFAULT_LATEST_LIMIT, ge=1, le=100),
    db = Depends(get_db)
) -> List[dict]:
    try:
        return interview_queries.get_latest_interviews(db, userId, limit)
    except Exception as e:
        logger.error(f"Error getting latest interviews: {e}")
        raise InternalServerError("Failed to load interviews.") from e


@router.get("/interviews/{interview_id}")
async def get_interview(interview_id: str, db = Depends(get_db)) -> dict:
    interview = interview_queries.get_interview_by_id(db, interview_id)
    if interview is None:
        raise InterviewNotFound(interview_id)
    return interview


@router.get("/interviews/{interview_id}/feedback")
async def get_interview_feedback(interview_id: str, userId: str, db = Depends(get_db)) -> dict:
    feedback = interview_queries.get_feedback_by_interview_id(db, interview_id, userId)
    if feedback is None:
        raise FeedbackNotFound(interview_id)
    return feedback


@router.get("/users/{user_id}/interviews")
async def get_user_interviews(user_id: str, custom: bool = False, db = Depends(get_db)) -> List[dict]:
    """List a user's interviews, newest first. custom=true keeps only resume-based interviews."""
    try:
        if custom:
            return interview_queries.get_resume_interviews_by_user_id(db, user_id)
        return interview_queries.get_interviews_by_user_id(db, user_id)
    except Exception as e:
        logger.error(f"Error getting interviews for user {user_id}: {e}")
        raise InternalServerError("Failed to load interviews.") from e
