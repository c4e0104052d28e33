import re
from typing import Optional

from .models import HIGH_RISK, LOW_RISK, MEDIUM_RISK, UNKNOWN_RISK


DEFAULT_LANGUAGE = "English"

LANGUAGE_NAMES = {
    "en": "English",
    "hi": "Hindi (हिंदी)",
    "mr": "Marathi (मराठी)",
    "english": "English",
    "hindi": "Hindi (हिंदी)",
    "marathi": "Marathi (मराठी)",
}

_RISK_WORDS = {
    "low": LOW_RISK,
    "medium": MEDIUM_RISK,
    "moderate": MEDIUM_RISK,
    "high": HIGH_RISK,
}

_RISK_PATTERN = re.compile(r"^\s*(low|medium|moderate|high)(?:\s+risk)?\s*\.?\s*$", re.IGNORECASE)
_UNKNOWN_PATTERN = re.compile(r"^\s*unknown(?:\s+risk)?\s*$", re.IGNORECASE)


def resolve_language(language: Optional[str]) -> str:
    """Map a language code or English name to the display name used in prompts.

    Unrecognized values fall back to English.
    """
    if not language:
        return DEFAULT_LANGUAGE
    return LANGUAGE_NAMES.get(language.strip().lower(), DEFAULT_LANGUAGE)


def normalize_risk_level(text: str) -> str:
    """Canonicalize the usual spellings of a risk label; leave anything else alone."""
    m = _RISK_PATTERN.match(text)
    if m:
        return _RISK_WORDS[m.group(1).lower()]
    if _UNKNOWN_PATTERN.match(text):
        return UNKNOWN_RISK
    return text
