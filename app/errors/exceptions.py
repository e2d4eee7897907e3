from fastapi import HTTPException
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_404_NOT_FOUND, HTTP_500_INTERNAL_SERVER_ERROR

class NotFound(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=HTTP_404_NOT_FOUND, detail=detail)

class InternalServerError(HTTPException):
    def __init__(self, detail: str = "Internal server error"):
        super().__init__(status_code=HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)

class InterviewNotFound(NotFound):
    def __init__(self, identifier: str = None):
        detail = f"Interview '{identifier}' not found." if identifier else "Interview not found."
        super().__init__(detail=detail)
class FeedbackNotFound(NotFound):
    def __init__(self, identifier: str = None):
        detail = f"Feedback for interview '{identifier}' not found." if identifier else "Feedback not found."
        super().__init__(detail=detail)

# Generation errors are rendered as {"success": false, "error": ...} by their own handler
class GenerationFailed(HTTPException):
    def __init__(self, status_code: int, error: str):
        super().__init__(status_code=status_code, detail=error)

class MissingRequiredFields(GenerationFailed):
    def __init__(self, error: str = "Missing required fields: resume, jobDescription, and userId are required"):
        super().__init__(status_code=HTTP_400_BAD_REQUEST, error=error)
class QuestionGenerationError(GenerationFailed):
    def __init__(self, error: str = "Failed to parse generated questions"):
        super().__init__(status_code=HTTP_500_INTERNAL_SERVER_ERROR, error=error)

class MissingConfigurationError(RuntimeError):
    """Raised when an environment variable needed by one code path is absent."""
    def __init__(self, variable: str):
        self.variable = variable
        super().__init__(f"{variable} environment variable is not set.")

class InvalidCallTransition(ValueError):
    def __init__(self, status: str, event: str):
        self.status = status
        self.event = event
        super().__init__(f"Cannot apply '{event}' while the call is {status}.")

class StructuredOutputError(ValueError):
    """The model returned something that does not satisfy the requested schema."""
    pass
