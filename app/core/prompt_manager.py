"""
Prompt Manager Module

This module keeps every LLM prompt used by the service in one place and isolates
them from user data. It implements a template-based system with explicit
placeholders and per-placeholder sanitization, so resumes, job descriptions and
transcripts are injected as data and never change the template itself.

The module contains:
- PromptTemplate: A dataclass for prompt templates with placeholders
- PromptManager: Main class for rendering the service's prompts
- sanitize_text: Utility function for text sanitization

Dependencies:
- dataclasses: For template data structures
- typing: For type hints
- re: For regex-based sanitization
- html: For HTML entity encoding

Author: @kcaparas1630
"""

from typing import Dict, List, Optional
from dataclasses import dataclass
import re
import html
import logging

logger = logging.getLogger(__name__)

# Long free-form inputs (resumes, transcripts) are passed through unescaped
LONG_TEXT = {"max_length": 20000, "escape_html": False}
TRANSCRIPT_TEXT = {"max_length": 60000, "escape_html": False}
SHORT_TEXT = {"max_length": 200, "escape_html": False}

def sanitize_text(text: str, max_length: int = 1000, escape_html: bool = True) -> str:
    """
    Sanitize text input before it is placed into a prompt.

    This function performs multiple sanitization steps:
    1. Optional HTML entity encoding
    2. Strips leading/trailing whitespace
    3. Removes null bytes and other control characters
    4. Configurable length limiting
    5. Normalizes unicode characters

    Args:
        text (str): The text to sanitize
        max_length (int): Maximum allowed length (default: 1000)
        escape_html (bool): Whether to HTML escape the text (default: True)

    Returns:
        str: The sanitized text

    Raises:
        ValueError: If text is None or empty after sanitization
    """
    if text is None:
        raise ValueError("Text cannot be None")

    text = str(text)

    if escape_html:
        text = html.escape(text)

    text = text.strip()

    # Remove null bytes and other control characters (except newlines and tabs)
    text = re.sub(r'[\x00-\x08\x0B\x0C\x0E-\x1F\x7F]', '', text)

    if len(text) > max_length:
        text = text[:max_length]
        logger.warning(f"Text truncated to {max_length} characters")

    text = text.encode('utf-8', errors='ignore').decode('utf-8')

    if not text:
        raise ValueError("Text cannot be empty after sanitization")

    return text

@dataclass
class PromptTemplate:
    """Prompt template with placeholders for safe data injection."""
    template: str
    placeholders: Dict[str, str]
    sanitization_config: Dict[str, Dict] = None  # Per-placeholder sanitization config

    def render(self, **kwargs) -> str:
        """
        Safely render the template with provided data.

        Args:
            **kwargs: Data to inject into placeholders

        Returns:
            str: Rendered prompt with sanitized data

        Raises:
            ValueError: If required placeholders are missing or data is invalid
        """
        missing_placeholders = set(self.placeholders.keys()) - set(kwargs.keys())
        if missing_placeholders:
            raise ValueError(f"Missing required placeholders: {missing_placeholders}")

        sanitized_data = {}
        for key, value in kwargs.items():
            if key in self.placeholders:
                config = self.sanitization_config.get(key, {}) if self.sanitization_config else {}
                max_length = config.get('max_length', 1000)
                escape_html = config.get('escape_html', True)

                sanitized_data[key] = sanitize_text(str(value), max_length=max_length, escape_html=escape_html)
            else:
                logger.warning(f"Unknown placeholder key: {key}")
                continue

        try:
            return self.template.format(**sanitized_data)
        except KeyError as e:
            raise ValueError(f"Template rendering error: {e}") from e

class PromptManager:
    """
    Renders the question generation, feedback and interview context prompts.

    All user-provided values go through `PromptTemplate.render`, which
    sanitizes them according to the template's per-placeholder config.
    """

    def __init__(self):
        self._templates = self._initialize_templates()

    def _initialize_templates(self) -> Dict[str, PromptTemplate]:
        """Initialize prompt templates with explicit placeholders."""
        return {
            "resume_job_questions": PromptTemplate(
                template="""Create a personalized technical interview for a candidate based on their resume and the job description.

Resume:
{resume}

Job Description:
{job_description}

Instructions:
1. Generate {amount} interview questions that assess the candidate's fit for this specific role
2. The questions should focus on {focus} aspects
3. Evaluate the candidate's experience level ({level}) and match questions to this level
4. Include questions that specifically address the gap between the candidate's resume and job requirements
5. For the job role of {role}
6. Format your response as a valid JSON array of strings: ["Question 1", "Question 2", "Question 3"]
7. The questions are going to be read by a voice assistant so do not use "/" or "*" or any other special characters which might break the voice assistant

Return ONLY the JSON array with no explanation or additional text.""",
                placeholders={
                    "resume": "Candidate resume text",
                    "job_description": "Target job description text",
                    "amount": "Number of questions to generate",
                    "focus": "Behavioral/technical focus",
                    "level": "Experience level",
                    "role": "Job role"
                },
                sanitization_config={
                    "resume": LONG_TEXT,
                    "job_description": LONG_TEXT,
                    "focus": SHORT_TEXT,
                    "level": SHORT_TEXT,
                    "role": SHORT_TEXT
                }
            ),
            "role_questions": PromptTemplate(
                template="""Prepare questions for a job interview.
The job role is {role}.
The job experience level is {level}.
The tech stack used in the job is: {techstack}.
The focus between behavioural and technical questions should lean towards: {focus}.
The amount of questions required is: {amount}.
Please return only the questions, without any additional text.
The questions are going to be read by a voice assistant so do not use "/" or "*" or any other special characters which might break the voice assistant.
Return the questions formatted like this:
["Question 1", "Question 2", "Question 3"]""",
                placeholders={
                    "role": "Job role",
                    "level": "Experience level",
                    "techstack": "Comma separated tech stack",
                    "focus": "Behavioral/technical focus",
                    "amount": "Number of questions to generate"
                },
                sanitization_config={
                    "role": SHORT_TEXT,
                    "level": SHORT_TEXT,
                    "techstack": {"max_length": 500, "escape_html": False},
                    "focus": SHORT_TEXT
                }
            ),
            "feedback_system": PromptTemplate(
                template="You are a professional interviewer analyzing a mock interview. Your task is to evaluate the candidate based on structured categories",
                placeholders={}
            ),
            "feedback_analysis": PromptTemplate(
                template="""You are an AI interviewer analyzing a mock interview. Your task is to evaluate the candidate based on structured categories. Be thorough and detailed in your analysis. Don't be lenient with the candidate. If there are mistakes or areas for improvement, point them out.
Transcript:
{transcript}

Please score the candidate from 0 to 100 in the following areas. Do not add categories other than the ones provided:
- **Communication Skills**: Clarity, articulation, structured responses.
- **Technical Knowledge**: Understanding of key concepts for the role.
- **Problem-Solving**: Ability to analyze problems and propose solutions.
- **Cultural & Role Fit**: Alignment with company values and job role.
- **Confidence & Clarity**: Confidence in responses, engagement, and clarity.""",
                placeholders={
                    "transcript": "Formatted interview transcript"
                },
                sanitization_config={
                    "transcript": TRANSCRIPT_TEXT
                }
            ),
            "feedback_context": PromptTemplate(
                template="""
Candidate Resume:
{resume}

Job Description:
{job_description}
""",
                placeholders={
                    "resume": "Candidate resume text",
                    "job_description": "Target job description text"
                },
                sanitization_config={
                    "resume": LONG_TEXT,
                    "job_description": LONG_TEXT
                }
            ),
            "interview_context": PromptTemplate(
                template="""
This is a tailored interview based on the candidate's resume and the job description.

Resume:
{resume}

Job Description:
{job_description}

Please conduct an interview tailored to assess this candidate's fit for the role.
""",
                placeholders={
                    "resume": "Candidate resume text",
                    "job_description": "Target job description text"
                },
                sanitization_config={
                    "resume": LONG_TEXT,
                    "job_description": LONG_TEXT
                }
            )
        }

    def get_resume_job_questions_prompt(self, generation_request) -> str:
        """
        Get the question generation prompt for a resume and job description.

        Args:
            generation_request: The validated ResumeJobInterviewRequest

        Returns:
            str: Prompt with sanitized data

        Raises:
            ValueError: If data validation fails
        """
        template = self._templates["resume_job_questions"]

        return template.render(
            resume=generation_request.resume,
            job_description=generation_request.jobDescription,
            amount=generation_request.amount,
            focus=generation_request.type or "a balance of technical and behavioral",
            level=generation_request.level or "as shown in their resume",
            role=generation_request.role or "the position in the job description"
        )

    def get_role_questions_prompt(self, role_request) -> str:
        """Get the question generation prompt for a preset role and tech stack."""
        template = self._templates["role_questions"]

        return template.render(
            role=role_request.role,
            level=role_request.level,
            techstack=role_request.techstack or "not specified",
            focus=role_request.type,
            amount=role_request.amount
        )

    def get_feedback_system_prompt(self) -> str:
        return self._templates["feedback_system"].render()

    def get_feedback_prompt(self, formatted_transcript: str, resume: Optional[str] = None, job_description: Optional[str] = None) -> str:
        """
        Get the feedback rubric prompt for a formatted transcript.

        Args:
            formatted_transcript: Transcript already rendered as "- role: content" lines
            resume: Optional resume text, only used together with job_description
            job_description: Optional job description text

        Returns:
            str: Prompt with sanitized data
        """
        prompt = self._templates["feedback_analysis"].render(
            transcript=formatted_transcript
        )
        if resume and job_description:
            context = self._templates["feedback_context"].render(
                resume=resume,
                job_description=job_description
            )
            prompt = f"{context}\n{prompt}"
        return prompt

    def get_interview_context(self, resume: str, job_description: str) -> str:
        return self._templates["interview_context"].render(
            resume=resume,
            job_description=job_description
        )

def format_questions(questions: List[str]) -> str:
    """Render questions as the dash-bulleted block the voice interviewer reads."""
    return "\n".join(f"- {question}" for question in questions)

def format_transcript(transcript) -> str:
    """Render transcript turns as "- role: content" lines."""
    return "".join(f"- {message.role}: {message.content}\n" for message in transcript)


# Global instance for reuse across the application
prompt_manager = PromptManager()
