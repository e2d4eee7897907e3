"""
Description:
Response schemas for the question generation endpoints.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel
from typing import List

class InterviewGenerationResponse(BaseModel):
    success: bool = True
    interviewId: str
    questions: List[str]

class RoleInterviewResponse(BaseModel):
    success: bool = True
    interviewId: str
