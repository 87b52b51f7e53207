"""
Value types shared by the execution runner and the plagiarism analyzer.

Results are built once per request and handed to the caller as-is.
Failures are carried inside the result rather than raised, so every
caller handles both branches explicitly.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class SubmissionInput:
    """A candidate's code submission."""
    code: str
    language: str
    stdin: str | None = None  # Execution only
    question_title: str = ""  # Analysis only
    question_description: str = ""  # Analysis only


class ExecutionFailure(Enum):
    """Reason an execution did not succeed."""
    INVALID_INPUT = "invalid_input"      # Rejected before any sandbox call
    COMPILE_ERROR = "compile_error"      # Sandbox reported a compilation error
    RUNTIME_ERROR = "runtime_error"      # Program exited non-zero or was killed
    TRANSPORT_ERROR = "transport_error"  # Sandbox unreachable or replied with garbage


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of a single code run."""
    success: bool
    output: str = ""  # Captured stdout, possibly empty
    error: str | None = None  # stderr or adapter-level message, None on success
    failure: ExecutionFailure | None = None
    exit_status: int | None = None

    def __post_init__(self):
        if self.success and (self.error is not None or self.failure is not None):
            raise ValueError("Successful execution cannot carry an error")
        if not self.success and (not self.error or self.failure is None):
            raise ValueError("Failed execution requires an error message and a failure kind")

    @classmethod
    def ok(cls, output: str, exit_status: int | None = 0) -> "ExecutionResult":
        return cls(success=True, output=output, exit_status=exit_status)

    @classmethod
    def failed(
        cls,
        failure: ExecutionFailure,
        error: str,
        output: str = "",
        exit_status: int | None = None,
    ) -> "ExecutionResult":
        return cls(
            success=False,
            output=output,
            error=error,
            failure=failure,
            exit_status=exit_status,
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "success": self.success,
            "output": self.output,
            "exitStatus": self.exit_status,
        }
        if not self.success:
            data["error"] = self.error
            data["failure"] = self.failure.value
        return data


class AnalysisStatus(Enum):
    """How an analysis verdict was reached."""
    ASSESSED = "assessed"    # Model reply parsed as JSON
    HEURISTIC = "heuristic"  # Reply unparseable, verdict guessed from text
    SKIPPED = "skipped"      # No model configured
    FAILED = "failed"        # Exception while talking to the model


@dataclass(frozen=True)
class AnalysisResult:
    """
    Outcome of a single plagiarism check.

    A confidence of 0 together with a SKIPPED or FAILED status means no
    assessment was made, not that the code is original.
    """
    is_plagiarized: bool
    confidence: int  # 0-100
    reasoning: str
    suggestions: str | None = None
    status: AnalysisStatus = AnalysisStatus.ASSESSED

    @property
    def is_assessment(self) -> bool:
        return self.status in (AnalysisStatus.ASSESSED, AnalysisStatus.HEURISTIC)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "isPlagiarized": self.is_plagiarized,
            "confidence": self.confidence,
            "reasoning": self.reasoning,
            "status": self.status.value,
        }
        if self.suggestions is not None:
            data["suggestions"] = self.suggestions
        return data
