"""
Runtime configuration for the review service.

Values come from environment variables (optionally via a .env file).
"""
import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

PISTON_API_URL = "https://emkc.org/api/v2/piston/execute"
DEFAULT_GEMINI_MODEL = "gemini-2.5-pro"


class Settings(BaseModel):
    # Execution sandbox
    sandbox_url: str = PISTON_API_URL
    sandbox_api_key: str | None = None
    sandbox_timeout: float = Field(15.0, gt=0)         # Seconds
    max_output_chars: int = Field(10000, gt=0)         # Truncation limit for output/error

    # Generative model
    gemini_api_key: str | None = None                  # None = analysis skipped
    gemini_model: str = DEFAULT_GEMINI_MODEL
    gemini_timeout: float = Field(60.0, gt=0)          # Seconds

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from environment variables.

        Empty variables are treated as unset, so an empty GEMINI_API_KEY
        disables analysis the same way a missing one does.
        """
        load_dotenv()
        values = {
            "sandbox_url": os.getenv("SANDBOX_URL"),
            "sandbox_api_key": os.getenv("SANDBOX_API_KEY"),
            "sandbox_timeout": os.getenv("SANDBOX_TIMEOUT"),
            "max_output_chars": os.getenv("MAX_OUTPUT_CHARS"),
            "gemini_api_key": os.getenv("GEMINI_API_KEY"),
            "gemini_model": os.getenv("GEMINI_MODEL"),
            "gemini_timeout": os.getenv("GEMINI_TIMEOUT"),
        }
        return cls(**{key: value for key, value in values.items() if value})
