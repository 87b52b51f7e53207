"""
Parsing of free-form model replies into analysis results.

A reply is parsed in two stages:
1. Strict: take the interior of a fenced code block (or the whole reply
   when there is none) and decode it as the expected JSON object.
2. Heuristic: if the strict stage fails, look for an affirmative
   plagiarism phrase in the raw text and fall back to a low-certainty
   verdict (70 if found, 30 otherwise).

The status of the returned result tells which stage produced it.
"""
import json
import logging
import re
from typing import Any

from .models import AnalysisResult, AnalysisStatus

logger = logging.getLogger(__name__)

FENCED_BLOCK_RE = re.compile(r"```([\w+#-]*)[ \t]*\r?\n?(.*?)```", re.DOTALL)

# Affirmative verdicts, e.g. `"isPlagiarized": true`, `plagiarized: yes`,
# `Is this code plagiarized? Yes`
AFFIRMATIVE_PATTERNS = [
    re.compile(r"plagiari[sz]ed.*?:\s*\"?(?:true|yes)\b", re.IGNORECASE),
    re.compile(r"\bis\b.*?plagiari[sz]ed.*?\byes\b", re.IGNORECASE),
]

HEURISTIC_POSITIVE_CONFIDENCE = 70
HEURISTIC_NEGATIVE_CONFIDENCE = 30
HEURISTIC_REASONING = "Failed to parse AI response properly. Please review the code manually."
HEURISTIC_SUGGESTIONS = "Consider running the analysis again or manually reviewing the submission."


class ResponseParseError(ValueError):
    """Model reply could not be decoded into the expected JSON object."""
    pass


def extract_json_candidate(text: str) -> str:
    """
    Return the text that should hold the JSON verdict.

    The first fenced block tagged `json` or left untagged whose body is a
    JSON object wins. Other blocks (usually an echo of the submitted code)
    are skipped. Without such a block the whole reply is the candidate.

    Examples:
        >>> extract_json_candidate('Sure!\\n```json\\n{"a": 1}\\n```')
        '{"a": 1}'
        >>> extract_json_candidate('{"a": 1}')
        '{"a": 1}'
    """
    for match in FENCED_BLOCK_RE.finditer(text):
        tag = match.group(1).lower()
        body = match.group(2).strip()
        if tag in ("", "json") and body.startswith("{"):
            return body
    return text.strip()


def _reject_constant(name: str) -> Any:
    raise ResponseParseError(f"Invalid JSON constant: {name}")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_strict(text: str) -> AnalysisResult:
    """
    Decode the JSON verdict in a model reply.

    Field values are copied through; confidence bounds are not checked.
    A non-integral confidence is rounded to the nearest integer.

    Raises:
        ResponseParseError: If no well-formed verdict object is found
    """
    candidate = extract_json_candidate(text)
    try:
        data = json.loads(candidate, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ResponseParseError(f"Expected a JSON object, got {type(data).__name__}")

    is_plagiarized = data.get("isPlagiarized")
    confidence = data.get("confidence")
    reasoning = data.get("reasoning")
    suggestions = data.get("suggestions")

    if not isinstance(is_plagiarized, bool):
        raise ResponseParseError(f"isPlagiarized must be a boolean, got {is_plagiarized!r}")
    if not _is_number(confidence):
        raise ResponseParseError(f"confidence must be a number, got {confidence!r}")
    if not isinstance(reasoning, str):
        raise ResponseParseError(f"reasoning must be a string, got {reasoning!r}")
    if suggestions is not None and not isinstance(suggestions, str):
        raise ResponseParseError(f"suggestions must be a string, got {suggestions!r}")

    return AnalysisResult(
        is_plagiarized=is_plagiarized,
        confidence=confidence if isinstance(confidence, int) else round(confidence),
        reasoning=reasoning,
        suggestions=suggestions,
        status=AnalysisStatus.ASSESSED,
    )


def has_affirmative_signal(text: str) -> bool:
    """
    Check free text for a phrase declaring the code plagiarized.

    Examples:
        >>> has_affirmative_signal('"isPlagiarized": true')
        True
        >>> has_affirmative_signal("The code is original.")
        False
    """
    return any(pattern.search(text) for pattern in AFFIRMATIVE_PATTERNS)


def parse_heuristic(text: str) -> AnalysisResult:
    """Guess a verdict from raw text when the JSON could not be decoded."""
    is_plagiarized = has_affirmative_signal(text)
    return AnalysisResult(
        is_plagiarized=is_plagiarized,
        confidence=HEURISTIC_POSITIVE_CONFIDENCE if is_plagiarized else HEURISTIC_NEGATIVE_CONFIDENCE,
        reasoning=HEURISTIC_REASONING,
        suggestions=HEURISTIC_SUGGESTIONS,
        status=AnalysisStatus.HEURISTIC,
    )


def parse_model_reply(text: str) -> AnalysisResult:
    """
    Parse a model reply, falling back to the text heuristic.

    Args:
        text: Raw reply text

    Returns:
        AnalysisResult with status ASSESSED or HEURISTIC
    """
    try:
        return parse_strict(text)
    except ResponseParseError as e:
        logger.error(f"Failed to parse model reply: {e}")
        logger.info(f"Raw reply: {text}")
        return parse_heuristic(text)
