"""
Supported languages for submission execution.

The registry maps the language identifiers used by the code editor
to the runtime names understood by the execution sandbox.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Language:
    """A language the sandbox can run."""
    id: str            # Identifier used by the editor, e.g. "python"
    name: str          # Display name
    runtime: str       # Sandbox runtime name
    filename: str      # Name of the submitted source file
    version: str = "*"  # Sandbox version selector, "*" = latest installed


SUPPORTED_LANGUAGES: dict[str, Language] = {
    lang.id: lang
    for lang in (
        Language(id="javascript", name="JavaScript", runtime="javascript", filename="main.js"),
        Language(id="python", name="Python", runtime="python", filename="main.py"),
        Language(id="java", name="Java", runtime="java", filename="Main.java"),
    )
}


def normalize_language_id(language: str) -> str:
    """
    Normalize a user-supplied language identifier.

    Examples:
        >>> normalize_language_id("  Python ")
        'python'
    """
    return language.strip().lower()


def get_language(language: str) -> Language | None:
    """
    Look up a supported language by identifier.

    Args:
        language: Language identifier, case-insensitive

    Returns:
        Language entry, or None if the language is not supported
    """
    if not isinstance(language, str):
        return None
    return SUPPORTED_LANGUAGES.get(normalize_language_id(language))


def is_supported(language: str) -> bool:
    return get_language(language) is not None


def supported_language_ids() -> list[str]:
    return list(SUPPORTED_LANGUAGES)
