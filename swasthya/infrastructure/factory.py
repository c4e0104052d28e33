from swasthya.application.invoker import BoundedInvoker
from swasthya.application.use_cases import GenerateAssessmentUseCase
from swasthya.infrastructure.config import ProviderConfig, Settings
from swasthya.infrastructure.llm.mistral_client import MistralLLMAdapter


def build_assessment_use_case(settings: Settings | None = None) -> GenerateAssessmentUseCase:
    config = ProviderConfig.from_settings(settings or Settings())
    llm = MistralLLMAdapter(config)
    return GenerateAssessmentUseCase(invoker=BoundedInvoker(llm, config.options))
