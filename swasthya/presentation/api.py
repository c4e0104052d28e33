import logging
from functools import lru_cache
from typing import Any, List, Optional, Union

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, field_validator

from swasthya.application.use_cases import GenerateAssessmentUseCase
from swasthya.domain.models import AssessmentRequest
from swasthya.domain.rules import resolve_language
from swasthya.infrastructure.config import Settings
from swasthya.infrastructure.factory import build_assessment_use_case


logger = logging.getLogger(__name__)


MISSING_FIELDS_MESSAGE = "Missing required fields: age, gender, or language"


class GenerateAssessmentBody(BaseModel):
    symptoms: Optional[Union[List[str], str]] = None
    age: Optional[Union[int, float, str]] = None
    gender: Optional[str] = None
    description: Optional[str] = None
    language: Optional[str] = None

    @field_validator("symptoms", mode="before")
    @classmethod
    def coerce_symptoms(cls, v: Any):
        if isinstance(v, list):
            return [item if isinstance(item, str) else str(item) for item in v if item is not None]
        if v is not None and not isinstance(v, str):
            return str(v)
        return v

    def missing_required(self) -> bool:
        return not self.age or not self.gender or not self.language

    def to_request(self) -> AssessmentRequest:
        symptoms = self.symptoms or []
        if isinstance(symptoms, str):
            symptoms = [symptoms]
        return AssessmentRequest(
            symptoms=symptoms,
            age=self.age,
            gender=self.gender,
            description=self.description,
            target_language=resolve_language(self.language),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


@lru_cache(maxsize=1)
def get_use_case() -> GenerateAssessmentUseCase:
    return build_assessment_use_case(get_settings())


app = FastAPI(
    title="Swasthya Sahayak API",
    description="Culturally aware health guidance for rural patients",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def invalid_body(request: Request, exc: RequestValidationError):
    logger.warning("Rejected assessment request: %s", exc.errors())
    return JSONResponse(status_code=400, content={"success": False, "message": MISSING_FIELDS_MESSAGE})


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s: %s", request.url.path, exc)
    content = {"success": False, "message": "Internal Server Error"}
    if get_settings().app_env == "development":
        content["error"] = str(exc)
    return JSONResponse(status_code=500, content=content)


@app.get("/")
async def root():
    return {"message": "Swasthya Sahayak Backend is Running!"}


@app.post("/api/assessment/generate")
async def generate_assessment(
    body: GenerateAssessmentBody,
    use_case: GenerateAssessmentUseCase = Depends(get_use_case),
):
    """
    Generate health guidance for the given symptoms.

    Always answers 200 with a complete result once the request is valid; a
    timed-out or failing provider shows up as `error`/`timedOut` in `data`.
    """
    if body.missing_required():
        return JSONResponse(status_code=400, content={"success": False, "message": MISSING_FIELDS_MESSAGE})

    result = await use_case.generate_assessment(body.to_request())
    return {"success": True, "data": result.to_payload()}


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.log_level)
    logger.info("Server is running on port %s", settings.port)
    logger.info("API Key configured: %s", "Yes" if settings.mistral_api_key else "No")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
