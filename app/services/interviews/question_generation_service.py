"""
Question Generation Service Module

This module turns a resume and job description (or a preset role and tech stack)
into a stored interview. It builds the generation prompt, makes a single model
call, recovers the question list from the model's free text and writes the
interview document.

Failure policy:
- Missing required inputs: MissingRequiredFields (400), nothing is written
- Model call failure or unrecoverable output: QuestionGenerationError (500), nothing is written
- Persistence failure: propagates to the caller

There is no retry and no idempotency: every successful call creates a new
interview document.

Dependencies:
- loguru: For logging operations.
- app.core.llm_provider: For the model capability.
- app.core.prompt_manager: For prompt rendering.
- app.helper.parse_questions: For the fallback parsing chain.

Author: @kcaparas1630
"""

import time
from loguru import logger
from app.core.llm_provider import LLMProvider
from app.core.prompt_manager import prompt_manager
from app.constants.interview_covers import get_random_interview_cover
from app.database import INTERVIEWS_COLLECTION
from app.errors.exceptions import MissingRequiredFields, QuestionGenerationError
from app.helper.parse_questions import parse_questions, QuestionParseError
from app.schemas.interview.interview import Interview
from app.schemas.interview.interview_requests import ResumeJobInterviewRequest, RoleInterviewRequest
from app.schemas.interview.interview_responses import InterviewGenerationResponse, RoleInterviewResponse

DEFAULT_AMOUNT = 5


def validate_resume_job_request(generation_request: ResumeJobInterviewRequest) -> ResumeJobInterviewRequest:
    """
    Check required fields and fill defaults.

    Raises:
        MissingRequiredFields: If resume, jobDescription or userId is absent or blank,
            or if amount is not a positive number
    """
    required = (generation_request.resume, generation_request.jobDescription, generation_request.userId)
    if any(value is None or not value.strip() for value in required):
        raise MissingRequiredFields()

    if generation_request.amount is None:
        generation_request.amount = DEFAULT_AMOUNT
    if generation_request.amount < 1:
        raise MissingRequiredFields("amount must be a positive number of questions")

    return generation_request


def save_interview(db, interview: Interview) -> str:
    _, doc_ref = db.collection(INTERVIEWS_COLLECTION).add(interview.to_document())
    logger.info(f"Interview saved with ID: {doc_ref.id}")
    return doc_ref.id


class QuestionGenerationService:
    """
    Service class for generating interview questions and storing the interview.
    """

    def __init__(self, llm: LLMProvider, db):
        """
        Initialize the service.

        Args:
            llm (LLMProvider): Model used for question generation.
            db: Firestore client.
        """
        self.llm = llm
        self.db = db

    async def _generate_questions(self, prompt: str, amount: int):
        llm_start_time = time.time()
        try:
            questions_text = await self.llm.generate_text(prompt)
        except Exception as e:
            logger.error(f"Question generation model call failed: {e}")
            raise QuestionGenerationError(f"Failed to generate questions: {e}") from e
        logger.info(f"Question generation completed in {time.time() - llm_start_time:.3f}s")
        logger.debug(f"Generated questions text: {questions_text}")

        try:
            return parse_questions(questions_text, amount)
        except QuestionParseError as e:
            logger.error(f"Failed to parse questions ({e.reason.value}): {e}")
            logger.debug(f"Raw questions text: {questions_text}")
            raise QuestionGenerationError() from e

    async def generate_resume_job_interview(self, generation_request: ResumeJobInterviewRequest) -> InterviewGenerationResponse:
        """
        Generate tailored questions from a resume and job description and store the interview.

        Args:
            generation_request (ResumeJobInterviewRequest): Resume, job description, owner
                and optional role/level/type/amount.

        Returns:
            InterviewGenerationResponse: The new interview id and its questions.

        Raises:
            MissingRequiredFields: If required inputs are missing
            QuestionGenerationError: If no questions could be produced
        """
        generation_request = validate_resume_job_request(generation_request)
        logger.info("Generating tailored interview questions based on resume and job description")

        prompt = prompt_manager.get_resume_job_questions_prompt(generation_request)
        questions = await self._generate_questions(prompt, generation_request.amount)

        interview = Interview(
            role=generation_request.role or "Custom Role",
            type=generation_request.type or "mixed",
            level=generation_request.level or "custom",
            resume=generation_request.resume,
            jobDescription=generation_request.jobDescription,
            isCustom=True,
            questions=questions,
            userId=generation_request.userId,
            finalized=True,
            coverImage=get_random_interview_cover()
        )
        interview_id = save_interview(self.db, interview)

        return InterviewGenerationResponse(interviewId=interview_id, questions=questions)

    async def generate_role_interview(self, role_request: RoleInterviewRequest) -> RoleInterviewResponse:
        """Generate questions for a preset role and tech stack and store the interview."""
        if role_request.amount < 1:
            raise MissingRequiredFields("amount must be a positive number of questions")
        logger.info(f"Generating {role_request.amount} questions for preset role {role_request.role}")

        prompt = prompt_manager.get_role_questions_prompt(role_request)
        questions = await self._generate_questions(prompt, role_request.amount)

        interview = Interview(
            role=role_request.role,
            type=role_request.type,
            level=role_request.level,
            techstack=[tech.strip() for tech in role_request.techstack.split(",") if tech.strip()],
            isCustom=False,
            questions=questions,
            userId=role_request.userid,
            finalized=True,
            coverImage=get_random_interview_cover()
        )
        interview_id = save_interview(self.db, interview)

        return RoleInterviewResponse(interviewId=interview_id)
