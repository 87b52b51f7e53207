from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field
from functools import lru_cache
import os
import logging

from review import (
    SUPPORTED_LANGUAGES,
    ExecutionRunner,
    PlagiarismAnalyzer,
    Settings,
    SubmissionInput,
)

# Configure logging to both file and console
LOG_DIR = os.getenv("LOG_DIR", "logs")
os.makedirs(LOG_DIR, exist_ok=True)

# Set log level from environment (default: INFO)
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
log_level = getattr(logging, LOG_LEVEL, logging.INFO)

log_formatter = logging.Formatter(
    '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

root_logger = logging.getLogger()
root_logger.setLevel(log_level)

# Console handler (for docker logs)
console_handler = logging.StreamHandler()
console_handler.setFormatter(log_formatter)
root_logger.addHandler(console_handler)

# File handler (persistent logs)
log_file = os.path.join(LOG_DIR, "review.log")
file_handler = logging.FileHandler(log_file, encoding='utf-8')
file_handler.setFormatter(log_formatter)
root_logger.addHandler(file_handler)

# Configure uvicorn loggers to use the same format
for uvicorn_logger in ("uvicorn", "uvicorn.access", "uvicorn.error"):
    logging.getLogger(uvicorn_logger).handlers = [console_handler, file_handler]

logger = logging.getLogger(__name__)
logger.info(f"Logging initialized. Log file: {log_file}")

app = FastAPI(title="Submission Review Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()


@lru_cache
def get_runner() -> ExecutionRunner:
    return ExecutionRunner.from_settings(get_settings())


@lru_cache
def get_analyzer() -> PlagiarismAnalyzer:
    return PlagiarismAnalyzer.from_settings(get_settings())


class ExecuteRequest(BaseModel):
    language: str = Field(..., min_length=1)
    code: str
    stdin: str | None = None


class AnalyzeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    code: str
    language: str
    question_title: str = Field(..., alias="questionTitle")
    question_description: str = Field(..., alias="questionDescription")


@app.get("/api/languages")
def get_languages():
    """List languages the sandbox can run."""
    return [{"id": lang.id, "name": lang.name} for lang in SUPPORTED_LANGUAGES.values()]


@app.post("/api/execute")
async def execute_code(request: ExecuteRequest, runner: ExecutionRunner = Depends(get_runner)):
    """
    Run a submission in the sandbox.

    Always answers 200; failures are reported in the body.
    """
    submission = SubmissionInput(
        code=request.code,
        language=request.language,
        stdin=request.stdin,
    )
    result = await runner.execute(submission)
    return result.to_dict()


@app.post("/api/analyze")
async def analyze_code(request: AnalyzeRequest, analyzer: PlagiarismAnalyzer = Depends(get_analyzer)):
    """Check a submission for plagiarism."""
    result = await analyzer.analyze(
        code=request.code,
        language=request.language,
        question_title=request.question_title,
        question_description=request.question_description,
    )
    return result.to_dict()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
