"""Tests for the HTTP boundary."""
import pytest
from fastapi.testclient import TestClient

from swasthya.domain.models import AssessmentResult, timeout_result
from swasthya.presentation.api import MISSING_FIELDS_MESSAGE, app, get_use_case


class StubUseCase:
    def __init__(self, result=None, error=None):
        self.result = result or AssessmentResult(summary="Rest well", recommendations=["Drink water"])
        self.error = error
        self.requests = []

    async def generate_assessment(self, request):
        self.requests.append(request)
        if self.error:
            raise self.error
        return self.result


@pytest.fixture
def stub():
    use_case = StubUseCase()
    app.dependency_overrides[get_use_case] = lambda: use_case
    yield use_case
    app.dependency_overrides.clear()


def _body(**overrides):
    body = {"symptoms": ["Fever"], "age": 40, "gender": "Male", "language": "hi", "description": "Since morning"}
    body.update(overrides)
    return body


def test_root_reports_running():
    client = TestClient(app)
    response = client.get("/")
    assert response.status_code == 200
    assert response.json() == {"message": "Swasthya Sahayak Backend is Running!"}


def test_generate_returns_envelope(stub):
    client = TestClient(app)
    response = client.post("/api/assessment/generate", json=_body())
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"] == {
        "summary": "Rest well",
        "recommendations": ["Drink water"],
        "culturalTips": "",
        "warningSigns": "",
        "riskLevel": "Medium Risk",
        "structuredData": True,
    }


def test_generate_maps_request_fields(stub):
    client = TestClient(app)
    client.post("/api/assessment/generate", json=_body(language="mr"))
    request = stub.requests[0]
    assert request.symptoms == ["Fever"]
    assert request.age == 40
    assert request.gender == "Male"
    assert request.description == "Since morning"
    assert request.target_language == "Marathi (मराठी)"


@pytest.mark.parametrize("symptoms, expected", [(None, []), ("Headache", ["Headache"]), ([], [])])
def test_symptoms_are_normalized(stub, symptoms, expected):
    client = TestClient(app)
    client.post("/api/assessment/generate", json=_body(symptoms=symptoms))
    assert stub.requests[0].symptoms == expected


@pytest.mark.parametrize("missing", ["age", "gender", "language"])
def test_missing_required_field_is_rejected(stub, missing):
    client = TestClient(app)
    body = _body()
    del body[missing]
    response = client.post("/api/assessment/generate", json=body)
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": MISSING_FIELDS_MESSAGE}
    assert stub.requests == []


def test_empty_required_field_is_rejected(stub):
    client = TestClient(app)
    response = client.post("/api/assessment/generate", json=_body(gender=""))
    assert response.status_code == 400


def test_timeout_result_is_still_success(stub):
    stub.result = timeout_result()
    client = TestClient(app)
    response = client.post("/api/assessment/generate", json=_body())
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["timedOut"] is True
    assert data["error"] is True
    assert data["riskLevel"] == "Unknown"


def test_unexpected_error_returns_500(stub, monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    stub.error = ValueError("boom")
    client = TestClient(app, raise_server_exceptions=False)
    response = client.post("/api/assessment/generate", json=_body())
    assert response.status_code == 500
    assert response.json() == {"success": False, "message": "Internal Server Error"}


def test_unexpected_error_detail_in_development(stub, monkeypatch):
    monkeypatch.setenv("APP_ENV", "development")
    stub.error = ValueError("boom")
    client = TestClient(app, raise_server_exceptions=False)
    response = client.post("/api/assessment/generate", json=_body())
    assert response.status_code == 500
    assert response.json()["error"] == "boom"


def test_missing_body_is_rejected(stub):
    client = TestClient(app)
    response = client.post("/api/assessment/generate")
    assert response.status_code == 400
    assert response.json() == {"success": False, "message": MISSING_FIELDS_MESSAGE}
    assert stub.requests == []


def test_malformed_field_type_is_rejected(stub):
    client = TestClient(app)
    response = client.post("/api/assessment/generate", json=_body(gender={"name": "Male"}))
    assert response.status_code == 400
    assert response.json()["success"] is False


def test_fractional_age_is_accepted(stub):
    client = TestClient(app)
    response = client.post("/api/assessment/generate", json={"age": 30.5, "gender": "F", "language": "en"})
    assert response.status_code == 200
    assert stub.requests[0].age == 30.5
    assert stub.requests[0].symptoms == []


def test_non_string_symptoms_are_coerced(stub):
    client = TestClient(app)
    response = client.post("/api/assessment/generate", json=_body(symptoms=["Fever", 1, None]))
    assert response.status_code == 200
    assert stub.requests[0].symptoms == ["Fever", "1"]
