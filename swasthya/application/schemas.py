from pydantic import BaseModel, ConfigDict, Field


class GenerationOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_output_tokens: int = Field(1024, gt=0)
    safety_filters: bool = True  # provider-side guardrail prompt
