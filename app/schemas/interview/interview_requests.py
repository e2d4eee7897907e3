"""
Description:
Request schemas for the two question generation endpoints.

Every field of ResumeJobInterviewRequest is optional at the schema level so that
missing required fields are reported as a 400 with a descriptive message by the
service instead of a 422 validation error.

Dependencies:
- pydantic: For data validation and settings management.
- typing: For type annotations.

Author: @kcaparas1630
"""
from pydantic import BaseModel, Field
from typing import Optional

class ResumeJobInterviewRequest(BaseModel):
    resume: Optional[str] = None
    jobDescription: Optional[str] = None
    userId: Optional[str] = None
    role: Optional[str] = None
    level: Optional[str] = None
    type: Optional[str] = Field(None, description="behavioral, technical or mixed")
    amount: Optional[int] = Field(default=5, description="Number of questions to generate")

class RoleInterviewRequest(BaseModel):
    """Body posted by the question-generation voice workflow."""
    type: str = Field(default="mixed")
    role: str
    level: str
    techstack: str = Field(default="", description="Comma separated list of technologies")
    amount: int = Field(default=5)
    userid: str
