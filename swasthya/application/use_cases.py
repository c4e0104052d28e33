import logging

from swasthya.application.invoker import BoundedInvoker
from swasthya.application.recovery import recover
from swasthya.domain.models import AssessmentRequest, AssessmentResult


logger = logging.getLogger(__name__)


SYSTEM_PROMPT = (
    "You are a culturally sensitive health advisor for rural India. "
    "Generate personalized health recommendations based on:"
)


def build_user_prompt(request: AssessmentRequest) -> str:
    symptoms = ", ".join(request.symptoms) if request.symptoms else "none reported"
    lines = [
        "Patient Details:",
        "- Gender: " + str(request.gender),
        "- Age: " + str(request.age),
        "- Main Symptoms: " + symptoms,
        '- Description: "' + (request.description or "None provided") + '"',
        "- Language: " + request.target_language,
    ]
    return "\n".join(lines)


def build_schema_instructions() -> str:
    return (
        "Provide specific guidance in the following JSON format structure "
        "(do not use markdown code blocks, just raw JSON):\n"
        "{\n"
        '  "summary": "A brief summary (2-3 sentences) explaining the condition in simple terms.",\n'
        '  "recommendations": "List of 5-7 practical, actionable recommendations. '
        'Use bullet points or numbered list in the string.",\n'
        '  "culturalTips": "Cultural considerations (home remedies, dietary advice common in Indian households).",\n'
        '  "warningSigns": "When to seek immediate medical attention or call 108.",\n'
        '  "riskLevel": "Low Risk | Medium Risk | High Risk"\n'
        "}"
    )


def build_writing_rules(target_language: str) -> str:
    return "\n".join([
        "IMPORTANT:",
        f"- Write ENTIRELY in {target_language}.",
        "- Use simple, clear language that rural populations can understand.",
        "- Be empathetic and reassuring.",
        '- Do NOT provide a medical diagnosis. Use phrases like "It appears to be...", "Possible causes include...".',
        '- For "riskLevel", estimate based on symptoms (e.g., chest pain = High Risk, mild cold = Low Risk).',
    ])


def build_assessment_prompt(request: AssessmentRequest) -> str:
    return "\n\n".join([
        SYSTEM_PROMPT,
        build_user_prompt(request),
        build_schema_instructions(),
        build_writing_rules(request.target_language),
    ])


class GenerateAssessmentUseCase:
    def __init__(self, invoker: BoundedInvoker):
        self.invoker = invoker

    async def generate_assessment(self, request: AssessmentRequest) -> AssessmentResult:
        prompt = build_assessment_prompt(request)
        outcome = await self.invoker.invoke(prompt)

        if isinstance(outcome, AssessmentResult):
            # Timeout and provider-failure results go out untouched.
            return outcome

        result = recover(outcome)
        if not result.structured_data:
            logger.warning("Provider reply was unstructured; returning plain-text guidance.")
        return result
