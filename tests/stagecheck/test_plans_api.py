import pytest
from httpx import AsyncClient, ASGITransport

from services.stagecheck.app.main import app


def _client() -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.mark.asyncio
async def test_validate_valid_plan():
    payload = {
        "stages": [
            {"id": 1, "name": "Infra", "dependsOn": [], "completionCriteria": ["Config loaded"]},
            {"id": 2, "name": "Domain", "dependsOn": [1], "completionCriteria": ["Unit tests >80%"]},
        ]
    }
    async with _client() as client:
        response = await client.post("/plans/validate", json=payload)

    assert response.status_code == 200, response.text
    assert response.json() == {"valid": True, "violationCount": 0, "byKind": {}, "violations": []}


@pytest.mark.asyncio
async def test_validate_reports_violations_as_data():
    payload = {
        "stages": [
            {"id": 1, "name": "A", "dependsOn": [2], "completionCriteria": ["x"]},
            {"id": 2, "name": "B", "dependsOn": [1], "completionCriteria": ["y"]},
        ]
    }
    async with _client() as client:
        response = await client.post("/plans/validate", json=payload)

    assert response.status_code == 200
    data = response.json()
    assert data["valid"] is False
    cycle = next(v for v in data["violations"] if v["kind"] == "CyclicDependency")
    assert {cycle["stageId"], cycle["relatedStageId"]} == {1, 2}
    assert cycle["hint"]


@pytest.mark.asyncio
async def test_validate_rejects_malformed_stage():
    payload = {"stages": [{"id": 1, "dependsOn": [], "completionCriteria": ["Config loaded"]}]}
    async with _client() as client:
        response = await client.post("/plans/validate", json=payload)

    assert response.status_code == 422
    body = response.json()
    assert body["error"] == "InvalidInput"
    assert body["location"] == "stages[0].name"


@pytest.mark.asyncio
async def test_validate_rejects_unparseable_body():
    async with _client() as client:
        response = await client.post("/plans/validate", json={"stages": "not-a-list"})

    assert response.status_code == 422
    assert response.json()["error"] == "InvalidInput"
    assert response.json()["location"] == "stages"


@pytest.mark.asyncio
async def test_body_shape_error_location_uses_index_brackets():
    async with _client() as client:
        response = await client.post("/plans/validate", json={"stages": ["x"]})

    assert response.status_code == 422
    assert response.json()["error"] == "InvalidInput"
    assert response.json()["location"] == "stages[0]"


@pytest.mark.asyncio
async def test_validate_markdown_table():
    text = (
        "| Stage | Name | Depends on | Completion criteria |\n"
        "|---|---|---|---|\n"
        "| 1 | API | 2 | works |\n"
        "| 2 | DB | none | Migrations pass |\n"
    )
    async with _client() as client:
        response = await client.post("/plans/validate/markdown", json={"text": text})

    assert response.status_code == 200
    kinds = [v["kind"] for v in response.json()["violations"]]
    assert kinds == ["ForwardOrSelfDependency", "VagueCriteria"]


@pytest.mark.asyncio
async def test_validate_markdown_without_table():
    async with _client() as client:
        response = await client.post("/plans/validate/markdown", json={"text": "# Plan"})

    assert response.status_code == 422
    assert response.json()["error"] == "InvalidInput"


@pytest.mark.asyncio
async def test_rules_and_health():
    async with _client() as client:
        rules = await client.get("/plans/rules")
        health = await client.get("/healthz")

    assert "works" in rules.json()["vagueTerms"]
    assert "everything" in rules.json()["fillerWords"]
    assert health.json()["status"] == "ok"
