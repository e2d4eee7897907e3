"""
Description:
Recover a list of interview questions from raw model output.

The model is asked for a bare JSON array of strings but does not always comply.
`parse_questions` walks an ordered fallback chain and stops at the first stage
that can read the text:

1. strip a surrounding code fence and parse as JSON (unwrapping {"questions": [...]})
2. JSON-parse the first top-level bracketed span found in the text
3. split that span on '","' boundaries
4. with no brackets at all, take the longer non-marker lines, minus ordinals

Arguments:
- text: The raw model response.
- amount: Maximum number of questions to return.

Returns:
- A non-empty list of question strings, truncated to `amount`.

Dependencies:
- json: For decoding the model output.
- app.constants.regex_patterns: For the precompiled recovery patterns.
- loguru: For logging which stage succeeded.

Author: @kcaparas1630

"""
import json
from enum import Enum
from typing import Any, List, Optional
from loguru import logger
from app.constants.regex_patterns import REGEX_PATTERNS

MIN_LINE_LENGTH = 10
BRACE_MARKERS = "{}[]"


class ParseFailureReason(str, Enum):
    """Why no questions could be recovered."""
    EMPTY_RESPONSE = "empty_response"
    NO_QUESTIONS_FOUND = "no_questions_found"
    EMPTY_RESULT = "empty_result"


class QuestionParseError(ValueError):
    def __init__(self, reason: ParseFailureReason, message: str):
        self.reason = reason
        super().__init__(message)


def strip_code_fence(text: str) -> str:
    text = text.strip()
    match = REGEX_PATTERNS['code_fence'].match(text)
    if match:
        return match.group(1).strip()
    return text


def _normalize_items(items: List[Any]) -> List[str]:
    questions = []
    for item in items:
        if isinstance(item, dict):
            item = item.get("question") or item.get("text")
        if not isinstance(item, str):
            continue
        item = item.strip()
        if item:
            questions.append(item)
    return questions


def _parse_json_array(text: str) -> Optional[List[str]]:
    """Stage 1. Returns None when the text is not a JSON array (or wrapped array)."""
    try:
        data = json.loads(strip_code_fence(text))
    except json.JSONDecodeError:
        return None
    if isinstance(data, dict) and isinstance(data.get("questions"), list):
        data = data["questions"]
    if not isinstance(data, list):
        logger.warning(f"Parsed questions is not an array: {type(data).__name__}")
        return None
    return _normalize_items(data)


def _first_bracketed_span(text: str) -> Optional[str]:
    """
    Inner text of the first top-level [...] span. Brackets inside double-quoted
    strings do not count. When the span never balances (stray quotes), the span
    runs to the last ']' in the text instead.
    """
    start = text.find("[")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escaped = False
    for index in range(start, len(text)):
        char = text[index]
        if in_string:
            if escaped:
                escaped = False
            elif char == "\\":
                escaped = True
            elif char == '"':
                in_string = False
        elif char == '"':
            in_string = True
        elif char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
            if depth == 0:
                return text[start + 1:index]

    end = text.rfind("]")
    if end > start:
        return text[start + 1:end]
    return None


def _parse_bracketed_span(inner: str) -> Optional[List[str]]:
    """Stage 2."""
    try:
        data = json.loads(f"[{inner}]")
    except json.JSONDecodeError:
        return None
    return _normalize_items(data)


def _split_bracketed_span(inner: str) -> List[str]:
    """Stage 3. Tolerates unescaped quotes and trailing commas inside the items."""
    items = []
    for raw in REGEX_PATTERNS['quoted_item_boundary'].split(inner):
        item = raw.strip().rstrip(",").strip().strip('"').strip("'").strip()
        if item:
            items.append(item)
    return items


def _parse_lines(text: str) -> List[str]:
    """Stage 4."""
    questions = []
    for line in text.splitlines():
        line = line.strip()
        if len(line) <= MIN_LINE_LENGTH:
            continue
        if REGEX_PATTERNS['fence_marker'].match(line) or line[0] in BRACE_MARKERS:
            continue
        question = REGEX_PATTERNS['leading_ordinal'].sub("", line, count=1).strip().strip('"').strip()
        if question:
            questions.append(question)
    return questions


def _finalize(questions: List[str], amount: int, stage: str) -> List[str]:
    if not questions:
        raise QuestionParseError(
            ParseFailureReason.EMPTY_RESULT,
            f"No usable questions after {stage}",
        )
    logger.info(f"Recovered {len(questions)} questions via {stage}")
    return questions[:amount]


def parse_questions(text: str, amount: int) -> List[str]:
    if text is None or not text.strip():
        raise QuestionParseError(ParseFailureReason.EMPTY_RESPONSE, "Model returned an empty response")

    questions = _parse_json_array(text)
    if questions is not None:
        return _finalize(questions, amount, "direct JSON parse")

    inner = _first_bracketed_span(text)
    if inner is not None:
        questions = _parse_bracketed_span(inner)
        if questions is not None:
            return _finalize(questions, amount, "bracketed span parse")
        logger.warning("Bracketed span is not valid JSON, splitting on item boundaries")
        return _finalize(_split_bracketed_span(inner), amount, "bracketed span split")

    questions = _parse_lines(text)
    if not questions:
        raise QuestionParseError(
            ParseFailureReason.NO_QUESTIONS_FOUND,
            "Failed to parse generated questions",
        )
    return _finalize(questions, amount, "line fallback")
