"""
Description:
Schema of a stored interview document.

An interview is written once by a generation endpoint and only read afterwards;
its question list is the fixed input of a voice session.

Dependencies:
- pydantic: For data validation and serialization.
- typing: For type annotations.

Author: @kcaparas1630
"""
from datetime import datetime, timezone
from pydantic import BaseModel, Field
from typing import List, Optional

def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()

class Interview(BaseModel):
    role: str
    type: str
    level: str
    questions: List[str]
    userId: str
    finalized: bool = True
    isCustom: bool = False
    coverImage: str
    createdAt: str = Field(default_factory=utc_now_iso)
    resume: Optional[str] = None
    jobDescription: Optional[str] = None
    techstack: Optional[List[str]] = None

    def to_document(self) -> dict:
        """Firestore payload; unset optional fields are left out of the document."""
        return self.model_dump(exclude_none=True)
