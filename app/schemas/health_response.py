"""
Description: 
Schema for the health check response.

Dependencies:
- pydantic: For data validation and settings management.

Author: @kcaparas1630
"""
from pydantic import BaseModel

class HealthResponse(BaseModel):
    """
    status is "ok" while the process serves requests; environment echoes ENV.
    """
    status: str
    service: str
    environment: str
