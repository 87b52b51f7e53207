"""
Submission review module for coding interviews.

This module contains the submission analysis pipeline:
- languages: Supported languages and their sandbox runtimes
- models: Shared input and result types
- config: Settings loaded from the environment
- runner: Execution of submissions in a remote sandbox
- response_parser: Two-stage parsing of model replies
- prompts: Prompt templates for the model
- analyzer: Plagiarism checks backed by a generative model
"""

from .languages import (
    Language,
    SUPPORTED_LANGUAGES,
    get_language,
    is_supported,
    supported_language_ids,
)

from .models import (
    SubmissionInput,
    ExecutionResult,
    ExecutionFailure,
    AnalysisResult,
    AnalysisStatus,
)

from .config import Settings

from .runner import (
    ExecutionRunner,
    SandboxError,
    SandboxTransportError,
    SandboxResponseError,
    parse_sandbox_response,
    interpret_reply,
    TRANSPORT_ERROR_MESSAGE,
)

from .response_parser import (
    ResponseParseError,
    extract_json_candidate,
    parse_strict,
    parse_heuristic,
    parse_model_reply,
    has_affirmative_signal,
)

from .prompts import build_plagiarism_prompt

from .analyzer import PlagiarismAnalyzer

__all__ = [
    # languages
    "Language",
    "SUPPORTED_LANGUAGES",
    "get_language",
    "is_supported",
    "supported_language_ids",
    # models
    "SubmissionInput",
    "ExecutionResult",
    "ExecutionFailure",
    "AnalysisResult",
    "AnalysisStatus",
    # config
    "Settings",
    # runner
    "ExecutionRunner",
    "SandboxError",
    "SandboxTransportError",
    "SandboxResponseError",
    "parse_sandbox_response",
    "interpret_reply",
    "TRANSPORT_ERROR_MESSAGE",
    # response_parser
    "ResponseParseError",
    "extract_json_candidate",
    "parse_strict",
    "parse_heuristic",
    "parse_model_reply",
    "has_affirmative_signal",
    # prompts
    "build_plagiarism_prompt",
    # analyzer
    "PlagiarismAnalyzer",
]
