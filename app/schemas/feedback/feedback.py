"""
Description:
Feedback schemas: the structured rubric the model must return, the stored
feedback document, and the request/result pair of feedback generation.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.
- app.constants.interviewer: For the rubric category names.
- app.schemas.voice.saved_message: For transcript turns.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from app.constants.interviewer import FEEDBACK_CATEGORIES
from app.schemas.voice.saved_message import SavedMessage
from app.schemas.interview.interview import utc_now_iso

class CategoryScore(BaseModel):
    name: str = Field(..., json_schema_extra={"enum": list(FEEDBACK_CATEGORIES)})
    score: int = Field(..., ge=0, le=100, description="Score for this category (0-100)")
    comment: str = Field(..., description="Justification for the score")

    @field_validator("name")
    @classmethod
    def name_is_a_rubric_category(cls, value: str) -> str:
        if value not in FEEDBACK_CATEGORIES:
            raise ValueError(f"Unknown feedback category: {value}")
        return value

class FeedbackAnalysis(BaseModel):
    """Shape the feedback model is asked to return."""
    totalScore: int = Field(..., ge=0, le=100, description="Overall interview score (0-100)")
    categoryScores: List[CategoryScore] = Field(..., min_length=5, max_length=5, description="One entry per rubric category")
    strengths: List[str] = Field(default_factory=list)
    areasForImprovement: List[str] = Field(default_factory=list)
    finalAssessment: str

    @field_validator("categoryScores")
    @classmethod
    def covers_every_category(cls, value: List[CategoryScore]) -> List[CategoryScore]:
        missing = set(FEEDBACK_CATEGORIES) - {category.name for category in value}
        if missing:
            raise ValueError(f"Missing feedback categories: {sorted(missing)}")
        return value

class Feedback(FeedbackAnalysis):
    interviewId: str
    userId: str
    createdAt: str = Field(default_factory=utc_now_iso)

class CreateFeedbackRequest(BaseModel):
    interviewId: str
    userId: str
    transcript: List[SavedMessage]
    feedbackId: Optional[str] = None
    resume: Optional[str] = None
    jobDescription: Optional[str] = None

class FeedbackResult(BaseModel):
    success: bool
    feedbackId: Optional[str] = None
