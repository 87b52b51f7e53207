"""
Execution runner adapter.

Sends a submission to a remote code-execution sandbox (Piston API or a
compatible runner) and normalizes the reply into an ExecutionResult.
The public entry point never raises: unsupported languages, sandbox
errors and program errors all come back as a failed result.
"""
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import PISTON_API_URL, Settings
from .languages import Language, get_language, supported_language_ids
from .models import ExecutionFailure, ExecutionResult, SubmissionInput

logger = logging.getLogger(__name__)

TRANSPORT_ERROR_MESSAGE = "Code execution service is unavailable. Please try again later."
TRUNCATION_MARKER = "\n... [output truncated]"


class SandboxError(Exception):
    """Base exception for sandbox communication errors."""
    pass


class SandboxTransportError(SandboxError):
    """The sandbox could not be reached or returned an HTTP error."""
    pass


class SandboxResponseError(SandboxError):
    """The sandbox replied with a body that is not a run report."""
    pass


@dataclass(frozen=True)
class SandboxStage:
    """One stage (compile or run) of a sandbox report."""
    stdout: str
    stderr: str
    exit_status: int | None
    signal: str | None = None

    @property
    def failed(self) -> bool:
        return self.signal is not None or (self.exit_status is not None and self.exit_status != 0)


@dataclass(frozen=True)
class SandboxReply:
    run: SandboxStage
    compile: SandboxStage | None = None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise SandboxResponseError(f"Expected text, got {type(value).__name__}")
    return value


def _exit_status(stage: dict[str, Any]) -> int | None:
    for key in ("exitStatus", "exit_status", "code"):
        if key in stage:
            value = stage[key]
            if value is None:
                return None
            if isinstance(value, bool) or not isinstance(value, int):
                raise SandboxResponseError(f"Invalid exit status: {value!r}")
            return value
    return None


def _parse_stage(stage: Any) -> SandboxStage:
    if not isinstance(stage, dict):
        raise SandboxResponseError(f"Expected an object, got {type(stage).__name__}")
    signal = stage.get("signal")
    return SandboxStage(
        stdout=_text(stage.get("stdout")),
        stderr=_text(stage.get("stderr")),
        exit_status=_exit_status(stage),
        signal=signal if isinstance(signal, str) and signal else None,
    )


def parse_sandbox_response(data: Any) -> SandboxReply:
    """
    Parse a sandbox reply into stages.

    Accepts the Piston shape ({"compile": {...}, "run": {...}}) and the
    flat shape ({"stdout": ..., "stderr": ..., "exitStatus": ...}).

    Raises:
        SandboxResponseError: If the reply matches neither shape
    """
    if not isinstance(data, dict):
        raise SandboxResponseError(f"Expected a JSON object, got {type(data).__name__}")

    if "run" in data:
        compile_stage = data.get("compile")
        return SandboxReply(
            run=_parse_stage(data["run"]),
            compile=_parse_stage(compile_stage) if compile_stage else None,
        )

    if not any(key in data for key in ("stdout", "stderr", "exitStatus", "exit_status", "code")):
        raise SandboxResponseError(f"Unrecognized sandbox reply keys: {sorted(data)}")
    return SandboxReply(run=_parse_stage(data))


def truncate_output(text: str, limit: int) -> str:
    """
    Cut text down to limit characters, marking the cut.

    Examples:
        >>> truncate_output("abcdef", 3)
        'abc\\n... [output truncated]'
        >>> truncate_output("abc", 3)
        'abc'
    """
    if len(text) <= limit:
        return text
    return text[:limit] + TRUNCATION_MARKER


def build_payload(language: Language, code: str, stdin: str | None) -> dict[str, Any]:
    """Build the Piston execute request body."""
    return {
        "language": language.runtime,
        "version": language.version,
        "files": [{"name": language.filename, "content": code}],
        "stdin": stdin or "",
    }


def interpret_reply(reply: SandboxReply, max_output_chars: int) -> ExecutionResult:
    """
    Map a parsed sandbox reply to an ExecutionResult.

    Compile errors take precedence over the run stage. A run that exited
    non-zero or was killed by a signal is a runtime error; its stdout is
    kept in the result.
    """
    if reply.compile is not None and reply.compile.failed:
        stage = reply.compile
        diagnostics = stage.stderr or stage.stdout or _status_message("Compilation", stage)
        return ExecutionResult.failed(
            ExecutionFailure.COMPILE_ERROR,
            truncate_output(diagnostics, max_output_chars),
            exit_status=stage.exit_status,
        )

    run = reply.run
    output = truncate_output(run.stdout, max_output_chars)
    if run.failed:
        return ExecutionResult.failed(
            ExecutionFailure.RUNTIME_ERROR,
            truncate_output(run.stderr or _status_message("Process", run), max_output_chars),
            output=output,
            exit_status=run.exit_status,
        )

    return ExecutionResult.ok(output, exit_status=run.exit_status)


def _status_message(what: str, stage: SandboxStage) -> str:
    if stage.signal:
        return f"{what} terminated by signal {stage.signal}"
    return f"{what} exited with status {stage.exit_status}"


class ExecutionRunner:
    """Client for the remote code-execution sandbox."""

    def __init__(
        self,
        sandbox_url: str = PISTON_API_URL,
        timeout: float = 15.0,
        api_key: str | None = None,
        max_output_chars: int = 10000,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the runner.

        Args:
            sandbox_url: Execute endpoint of the sandbox
            timeout: Request timeout in seconds
            api_key: Optional bearer token for the sandbox
            max_output_chars: Output and error text are truncated past this length
            transport: Custom httpx transport (used by tests)
        """
        self.sandbox_url = sandbox_url
        self.timeout = timeout
        self.max_output_chars = max_output_chars
        self.headers = {"Accept": "application/json"}
        if api_key:
            self.headers["Authorization"] = f"Bearer {api_key}"
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExecutionRunner":
        return cls(
            sandbox_url=settings.sandbox_url,
            timeout=settings.sandbox_timeout,
            api_key=settings.sandbox_api_key,
            max_output_chars=settings.max_output_chars,
        )

    async def _post(self, payload: dict[str, Any]) -> Any:
        """
        Send one execute request and return the decoded JSON body.

        Raises:
            SandboxTransportError: On network errors, timeouts, HTTP errors
                or a body that is not JSON
        """
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.post(self.sandbox_url, json=payload, headers=self.headers)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            raise SandboxTransportError(
                f"Sandbox returned status {e.response.status_code}: {e.response.text[:200]}"
            ) from e
        except httpx.HTTPError as e:
            raise SandboxTransportError(f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise SandboxTransportError(f"Sandbox reply is not JSON: {e}") from e

    async def execute(self, submission: SubmissionInput) -> ExecutionResult:
        """
        Run a submission in the sandbox.

        Makes at most one outbound request and never retries: a retried
        run could hide a nondeterministic program.

        Args:
            submission: Code, language and optional stdin

        Returns:
            ExecutionResult; never raises
        """
        language = get_language(submission.language)
        if language is None:
            logger.info(f"Rejected execution request for unsupported language {submission.language!r}")
            return ExecutionResult.failed(
                ExecutionFailure.INVALID_INPUT,
                f"Language '{submission.language}' is not supported. "
                f"Supported languages: {', '.join(supported_language_ids())}",
            )

        payload = build_payload(language, submission.code, submission.stdin)
        logger.info(f"Executing {language.id} submission ({len(submission.code)} chars)")

        try:
            data = await self._post(payload)
            reply = parse_sandbox_response(data)
        except SandboxError as e:
            logger.warning(f"Sandbox call failed: {e}")
            return ExecutionResult.failed(ExecutionFailure.TRANSPORT_ERROR, TRANSPORT_ERROR_MESSAGE)
        except Exception:
            logger.exception("Unexpected error while executing submission")
            return ExecutionResult.failed(ExecutionFailure.TRANSPORT_ERROR, TRANSPORT_ERROR_MESSAGE)

        result = interpret_reply(reply, self.max_output_chars)
        if result.success:
            logger.info(f"Execution finished: exit status {result.exit_status}")
        else:
            logger.info(f"Execution failed: {result.failure.value}")
        return result
