"""Turns the provider's free-form reply into an AssessmentResult.

Four ordered tiers, each tried only when the previous one produced nothing
usable:

1. strict JSON parse of the first-``{``-to-last-``}`` span,
2. per-field regex extraction from the raw reply,
3. stripping JSON syntax and keeping the text as a plain summary,
4. a final polish (sanitize, coerce, default) over whichever tier won.

A tier that does not apply returns None; nothing in here raises for bad input.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from swasthya.domain.models import AssessmentResult, MEDIUM_RISK
from swasthya.domain.rules import normalize_risk_level


logger = logging.getLogger(__name__)


# Partial regex matches at or below this length are treated as noise.
MIN_EXTRACTED_LENGTH = 5
MIN_PLAIN_TEXT_LENGTH = 5

DEFAULT_SUMMARY = "Health Guidance"
UNCLEAR_FORMAT_MESSAGE = (
    "Guidance generated, but format was unclear. Please consult a doctor for advice."
)

RESULT_FIELDS = ("summary", "recommendations", "culturalTips", "warningSigns", "riskLevel")
LABEL_TOKENS = RESULT_FIELDS + ("data",)

_FENCE_JSON = re.compile(r"```json", re.IGNORECASE)
_OBJECT_SPAN = re.compile(r"\{[\s\S]*\}")
_LEADING_BRACE = re.compile(r"^\s*\{")
_TRAILING_BRACE = re.compile(r"\}\s*\Z")
_QUOTE_COMMA_EOL = re.compile(r"[\"'],\s*$", re.MULTILINE)
_QUOTE_EOL = re.compile(r"\"\s*$", re.MULTILINE)
_QUOTE_BOL = re.compile(r"^\"", re.MULTILINE)
_JSON_PUNCTUATION = re.compile(r"[{}\"\[\]]")


def _field_patterns(name: str) -> List[re.Pattern]:
    key = re.escape(name)
    variants = (
        rf'"{key}"\s*:\s*"([^"]*)"',
        rf'"{key}"\s*:\s*\'([^\']*)\'',
        rf'\'{key}\'\s*:\s*"([^"]*)"',
        rf"'{key}'\s*:\s*'([^']*)'",
        rf'{key}\s*:\s*"([^"]*)"',
    )
    return [re.compile(v, re.IGNORECASE) for v in variants]


_FIELD_PATTERNS = {name: _field_patterns(name) for name in RESULT_FIELDS}
_LABEL_PATTERNS = [
    re.compile(rf"['\"]?{re.escape(token)}['\"]?\s*:\s*", re.IGNORECASE) for token in LABEL_TOKENS
]


@dataclass(frozen=True)
class Parsed:
    fields: Dict[str, Any]


@dataclass(frozen=True)
class PartiallyExtracted:
    fields: Dict[str, str]


@dataclass(frozen=True)
class PlainText:
    text: str


TierOutcome = Union[Parsed, PartiallyExtracted, PlainText]


def strip_code_fences(text: str) -> str:
    return _FENCE_JSON.sub("", text).replace("```", "").strip()


def _reject_constant(name: str):
    raise ValueError(f"non-standard JSON constant {name}")


def parse_json_object(cleaned: str) -> Optional[Parsed]:
    m = _OBJECT_SPAN.search(cleaned)
    if not m:
        return None
    try:
        data = json.loads(m.group(0), parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        logger.warning("Provider reply is not valid JSON: %s", e)
        return None
    # An empty object carries no guidance.
    if not isinstance(data, dict) or not data:
        return None
    return Parsed(fields=data)


def extract_field(raw_text: str, name: str) -> str:
    for pattern in _FIELD_PATTERNS[name]:
        m = pattern.search(raw_text)
        if m and m.group(1):
            return m.group(1)
    return ""


def extract_fields(raw_text: str) -> Optional[PartiallyExtracted]:
    fields = {name: extract_field(raw_text, name) for name in RESULT_FIELDS}
    if (
        len(fields["summary"]) > MIN_EXTRACTED_LENGTH
        or len(fields["recommendations"]) > MIN_EXTRACTED_LENGTH
    ):
        return PartiallyExtracted(fields=fields)
    return None


def strip_to_plain_text(cleaned: str) -> PlainText:
    text = _LEADING_BRACE.sub("", cleaned, count=1)
    text = _TRAILING_BRACE.sub("", text, count=1)
    for pattern in _LABEL_PATTERNS:
        text = pattern.sub("", text)
    text = _QUOTE_COMMA_EOL.sub("\n", text)
    text = _QUOTE_EOL.sub("", text)
    text = _QUOTE_BOL.sub("", text)

    text = text.strip()
    if len(text) < MIN_PLAIN_TEXT_LENGTH:
        text = UNCLEAR_FORMAT_MESSAGE
    return PlainText(text=text)


def sanitize_text(value: Any) -> str:
    """Returns "" for non-strings; strips JSON punctuation from strings that still look like JSON."""
    if not isinstance(value, str):
        return ""
    if value.strip().startswith(("{", "[", '"')):
        return _JSON_PUNCTUATION.sub("", value).strip()
    return value


def coerce_recommendations(value: Any) -> List[str]:
    if isinstance(value, list):
        items = []
        for item in value:
            if item is None:
                continue
            if not isinstance(item, str):
                item = sanitize_text(json.dumps(item, ensure_ascii=False))
            items.append(item)
        return items
    text = sanitize_text(value)
    return [text] if text else []


def _polished_fields(fields: Mapping[str, Any]) -> Dict[str, Any]:
    summary = sanitize_text(fields.get("summary"))
    risk_level = sanitize_text(fields.get("riskLevel"))
    return {
        "summary": summary if summary.strip() else DEFAULT_SUMMARY,
        "recommendations": coerce_recommendations(fields.get("recommendations")),
        "cultural_tips": sanitize_text(fields.get("culturalTips")),
        "warning_signs": sanitize_text(fields.get("warningSigns")),
        "risk_level": normalize_risk_level(risk_level) if risk_level.strip() else MEDIUM_RISK,
    }


def finalize(outcome: TierOutcome) -> AssessmentResult:
    if isinstance(outcome, PlainText):
        fields = {"summary": outcome.text, "riskLevel": MEDIUM_RISK}
        return AssessmentResult(**_polished_fields(fields), structured_data=False, raw_text=outcome.text)
    return AssessmentResult(**_polished_fields(outcome.fields), structured_data=True)


def polish(result: AssessmentResult) -> AssessmentResult:
    """Re-applies the final sanitize/default pass to an existing result.

    A result produced by ``recover`` comes back unchanged.
    """
    fields = result.model_dump(
        by_alias=True,
        include={"summary", "recommendations", "cultural_tips", "warning_signs", "risk_level"},
    )
    return result.model_copy(update=_polished_fields(fields))


def recover(raw_text: str) -> AssessmentResult:
    if not isinstance(raw_text, str):
        raw_text = "" if raw_text is None else str(raw_text)

    cleaned = strip_code_fences(raw_text)

    outcome: Optional[TierOutcome] = parse_json_object(cleaned)
    if outcome is None:
        outcome = extract_fields(raw_text)
        if outcome is None:
            logger.warning("Falling back to plain-text guidance. Raw: %s", raw_text[:200])
            outcome = strip_to_plain_text(cleaned)
        else:
            logger.info("Recovered guidance fields by pattern matching.")

    return finalize(outcome)
