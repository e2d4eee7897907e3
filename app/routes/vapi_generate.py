"""
Voice Workflow Generation Route

Description:
Callback the generation-mode voice workflow calls once it has collected the
candidate's role, level, tech stack and question count. Generates the questions
and stores a preset-role interview.

Arguments:
- request: An instance of Request, required for rate limiting.
- role_request: An instance of RoleInterviewRequest.

Returns:
- RoleInterviewResponse with the new interview id.

Dependencies:
- fastapi: For creating the route and dependency injection.
- app.core.route_limiters: For rate limiting functionality.
- app.services.interviews.question_generation_service: For generation and storage.
- loguru: For logging.

Author: @kcaparas1630
"""
from fastapi import APIRouter, Depends, Request
from app.core.llm_provider import LLMProvider, get_question_llm
from app.core.route_limiters import limiter
from app.database import get_db
from app.errors.exceptions import GenerationFailed, QuestionGenerationError
from app.schemas.interview.interview_requests import RoleInterviewRequest
from app.schemas.interview.interview_responses import RoleInterviewResponse
from app.services.interviews.question_generation_service import QuestionGenerationService
from loguru import logger

router = APIRouter(
    prefix="/api",
    tags=["vapi"],
    responses={404: {"description": "Not found"}}
)


@router.post("/vapi/generate", response_model=RoleInterviewResponse)
@limiter.limit("5/minute")
async def generate_role_interview(
    request: Request,
    role_request: RoleInterviewRequest,
    db = Depends(get_db),
    llm: LLMProvider = Depends(get_question_llm)
):
    """
    Request parameter is required for rate limiting.
    """
    try:
        service = QuestionGenerationService(llm, db)
        return await service.generate_role_interview(role_request)
    except GenerationFailed:
        raise
    except Exception as e:
        logger.error(f"Error generating role interview: {e}")
        raise QuestionGenerationError(str(e)) from e
