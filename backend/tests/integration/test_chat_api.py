"""API tests for the chatbot, trial and export endpoints."""

import csv
import io

import pytest
from fastapi import Depends
from openpyxl import load_workbook

from pharmagenie.infrastructure.database.repositories import SQLAlchemyRecordStore
from pharmagenie.infrastructure.dependencies import get_record_store, get_session_factory
from tests.integration.services.app_overrides import api_client


class FlakyRecordStore(SQLAlchemyRecordStore):
    """Real store whose reads fail for the named collections."""

    def __init__(self, session_factory, failing: set[str]):
        super().__init__(session_factory)
        self._failing = failing

    async def find(self, collection, predicate, *, limit, text_search=None):
        if collection in self._failing:
            raise ConnectionError(f"{collection} unavailable")
        return await super().find(collection, predicate, limit=limit, text_search=text_search)

    async def count(self, collection, predicate):
        if collection in self._failing:
            raise ConnectionError(f"{collection} unavailable")
        return await super().count(collection, predicate)


def _flaky(*failing: str):
    async def override(session_factory=Depends(get_session_factory)):
        yield FlakyRecordStore(session_factory, set(failing))

    return {get_record_store: override}


# ── /chat ──


@pytest.mark.asyncio
async def test_chat_list_query(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        response = await client.post("/api/v1/chat", json={"query": "Show all active clinical trials"})

    assert response.status_code == 200
    data = response.json()
    assert data["type"] == "list"
    assert [t["trial_id"] for t in data["trials"]] == ["CT-2024-002"]
    assert data["summary"]["total_records"] == 1
    assert "missing_collections" not in data


@pytest.mark.asyncio
async def test_chat_count_query_uses_totals(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        response = await client.post(
            "/api/v1/chat", json={"query": "How many participants are enrolled?"}
        )

    data = response.json()
    assert data["type"] == "count"
    assert data["count"] == 3
    assert data["totals"] == {"participants": 3}


@pytest.mark.asyncio
async def test_chat_trial_detail(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        response = await client.post("/api/v1/chat", json={"query": "Details for CT-2024-001"})

    data = response.json()
    assert data["type"] == "detail"
    assert data["trials"][0]["enrollment_progress"] == "40/100"


@pytest.mark.asyncio
async def test_chat_reports_missing_collections(tmp_path):
    async with api_client(tmp_path / "api.db", overrides=_flaky("drugs")) as client:
        response = await client.post(
            "/api/v1/chat", json={"query": "Show trials with drug ABC123 and their sites"}
        )

    assert response.status_code == 200
    data = response.json()
    assert data["missing_collections"] == ["drugs"]
    assert [t["trial_id"] for t in data["trials"]] == ["CT-2024-001"]


@pytest.mark.asyncio
async def test_chat_returns_503_when_every_read_fails(tmp_path):
    async with api_client(tmp_path / "api.db", overrides=_flaky("trials")) as client:
        response = await client.post("/api/v1/chat", json={"query": "list trials"})
    assert response.status_code == 503


@pytest.mark.asyncio
async def test_chat_rejects_empty_query(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        response = await client.post("/api/v1/chat", json={"query": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_analyze_endpoint(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        response = await client.post(
            "/api/v1/chat/analyze", json={"query": "Find Phase III diabetes studies"}
        )

    data = response.json()
    assert data["collections"] == ["trials"]
    assert data["filters"] == {"phase": "Phase III"}
    assert data["entities"]["indication"] == ["diabetes"]


# ── /trials ──


@pytest.mark.asyncio
async def test_trials_list_and_detail(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        listing = await client.get("/api/v1/trials", params={"limit": 2})
        detail = await client.get("/api/v1/trials/CT-2024-002")
        missing = await client.get("/api/v1/trials/CT-1999-000")

    assert [t["trial_id"] for t in listing.json()] == ["CT-2024-001", "CT-2024-002"]
    assert [s["site_id"] for s in detail.json()["sites"]] == ["SITE-002"]
    assert missing.status_code == 404


# ── /export ──


@pytest.mark.asyncio
async def test_export_chat_response_to_csv(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        chat = await client.post("/api/v1/chat", json={"query": "List all drugs in database"})
        response = await client.post("/api/v1/export/csv", json={"responseData": chat.json()})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="drugs_' in response.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(response.text)))
    assert [r[0] for r in rows] == ["Drug ID", "ABC123", "XYZ789"]
    assert rows[1][3] == "FDA Approved"


@pytest.mark.asyncio
async def test_csv_export_refuses_multi_collection_data(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        chat = await client.post(
            "/api/v1/chat", json={"query": "Show trials with drug ABC123 and their sites"}
        )
        response = await client.post("/api/v1/export/csv", json={"responseData": chat.json()})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_export_multi_collection_excel(tmp_path):
    async with api_client(tmp_path / "api.db") as client:
        chat = await client.post(
            "/api/v1/chat", json={"query": "Show trials with drug ABC123 and their sites"}
        )
        response = await client.post("/api/v1/export/excel", json={"responseData": chat.json()})

    assert response.status_code == 200
    assert 'filename="pharma_data_' in response.headers["content-disposition"]
    workbook = load_workbook(io.BytesIO(response.content))
    assert workbook.sheetnames == ["Summary", "Trials", "Drugs", "Sites"]


@pytest.mark.asyncio
async def test_export_raw_records(tmp_path):
    records = [{"site_id": "SITE-009", "name": "Oslo Clinic", "city": "Oslo", "country": "Norway"}]
    async with api_client(tmp_path / "api.db") as client:
        response = await client.post(
            "/api/v1/export/excel", json={"data": records, "collectionType": "sites"}
        )
        missing_type = await client.post("/api/v1/export/csv", json={"data": records})

    assert response.status_code == 200
    assert load_workbook(io.BytesIO(response.content)).active.title == "Sites"
    assert missing_type.status_code == 422
