"""
Plagiarism analyzer backed by a generative model.

The analyzer asks a Gemini model whether a submission looks plagiarized
and turns the free-form reply into an AnalysisResult. Its mode is fixed
at construction: without a credential it is unconfigured and returns a
"skipped" result without touching the network.
"""
import logging
from typing import Any

from google import genai
from google.genai import types

from .config import DEFAULT_GEMINI_MODEL, Settings
from .models import AnalysisResult, AnalysisStatus
from .prompts import build_plagiarism_prompt
from .response_parser import parse_model_reply

logger = logging.getLogger(__name__)

SKIPPED_REASONING = "API key not configured. Analysis skipped."
UNKNOWN_ERROR_REASONING = "Unknown error occurred"


class PlagiarismAnalyzer:
    """Plagiarism checks for code submissions."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str = DEFAULT_GEMINI_MODEL,
        timeout: float = 60.0,
        client: Any = None,
    ):
        """
        Initialize the analyzer.

        Args:
            api_key: Gemini API key; None leaves the analyzer unconfigured
            model: Model identifier
            timeout: Request timeout in seconds
            client: Pre-built client exposing aio.models.generate_content
                (overrides api_key; used by tests)
        """
        self.model = model
        if client is None and api_key:
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout * 1000)),
            )
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings) -> "PlagiarismAnalyzer":
        return cls(
            api_key=settings.gemini_api_key,
            model=settings.gemini_model,
            timeout=settings.gemini_timeout,
        )

    @property
    def configured(self) -> bool:
        return self._client is not None

    async def _generate(self, prompt: str) -> str:
        response = await self._client.aio.models.generate_content(
            model=self.model,
            contents=prompt,
        )
        text = response.text
        if not text:
            raise ValueError("Model returned an empty response")
        return text

    async def analyze(
        self,
        code: str,
        language: str,
        question_title: str,
        question_description: str,
    ) -> AnalysisResult:
        """
        Assess whether a submission looks plagiarized.

        Makes at most one model call; results are never cached.

        Args:
            code: Submitted source code
            language: Language identifier of the submission
            question_title: Title of the interview question
            question_description: Full question text

        Returns:
            AnalysisResult; never raises
        """
        if not self.configured:
            logger.warning("GEMINI_API_KEY not found. Skipping plagiarism check.")
            return AnalysisResult(
                is_plagiarized=False,
                confidence=0,
                reasoning=SKIPPED_REASONING,
                status=AnalysisStatus.SKIPPED,
            )

        try:
            prompt = build_plagiarism_prompt(code, language, question_title, question_description)
            logger.info(f"Requesting plagiarism analysis from {self.model} ({len(code)} chars of {language})")
            reply = await self._generate(prompt)
            result = parse_model_reply(reply)
        except Exception as e:
            logger.exception("Code analysis error")
            return AnalysisResult(
                is_plagiarized=False,
                confidence=0,
                reasoning=str(e) or UNKNOWN_ERROR_REASONING,
                status=AnalysisStatus.FAILED,
            )

        logger.info(
            f"Analysis finished: plagiarized={result.is_plagiarized}, "
            f"confidence={result.confidence}, status={result.status.value}"
        )
        return result
