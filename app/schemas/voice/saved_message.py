"""
Description:
A single speaker-tagged transcript turn captured during a voice session.

Dependencies:
- pydantic: For data validation and settings management.

Author: @kcaparas1630
"""
from pydantic import BaseModel
from typing import Literal

class SavedMessage(BaseModel):
    role: Literal["user", "system", "assistant"]
    content: str
