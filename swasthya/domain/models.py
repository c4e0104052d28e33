from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


LOW_RISK = "Low Risk"
MEDIUM_RISK = "Medium Risk"
HIGH_RISK = "High Risk"
UNKNOWN_RISK = "Unknown"

RISK_LEVELS = (LOW_RISK, MEDIUM_RISK, HIGH_RISK, UNKNOWN_RISK)

TIMEOUT_SUMMARY = "Service timed out. Please try again."
UNAVAILABLE_SUMMARY = "Service temporarily unavailable. Please try again."


class AssessmentRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    symptoms: List[str] = []
    age: Union[int, float, str]
    gender: str
    description: Optional[str] = None
    target_language: str = "English"

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: Optional[str]):
        if v is not None:
            v = v.strip()
            if len(v) == 0:
                return None
        return v


class AssessmentResult(BaseModel):
    """UI-ready health guidance.

    Serialized with camelCase keys. The optional diagnostic flags are left as
    None when unset and dropped by ``to_payload``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)

    summary: str = Field(..., min_length=1)
    recommendations: List[str] = []
    cultural_tips: str = ""
    warning_signs: str = ""
    risk_level: str = MEDIUM_RISK
    structured_data: bool = True
    error: Optional[bool] = None
    timed_out: Optional[bool] = None
    raw_text: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return bool(self.error or self.timed_out)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def timeout_result() -> AssessmentResult:
    return AssessmentResult(
        summary=TIMEOUT_SUMMARY,
        risk_level=UNKNOWN_RISK,
        structured_data=False,
        error=True,
        timed_out=True,
    )


def unavailable_result() -> AssessmentResult:
    return AssessmentResult(
        summary=UNAVAILABLE_SUMMARY,
        risk_level=UNKNOWN_RISK,
        structured_data=False,
        error=True,
    )
