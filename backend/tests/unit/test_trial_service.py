"""Unit tests for the TrialService."""

import pytest

from pharmagenie.application.interfaces.record_store import RecordStore
from pharmagenie.application.services.trial_service import TrialService
from pharmagenie.domain.entities.query import RecordPredicate
from pharmagenie.domain.exceptions import EntityNotFoundError


class FakeRecordStore(RecordStore):
    def __init__(self):
        self.limits: list[int] = []
        self.trial = {"trial_id": "CT-2024-001", "sites": [], "participants": [], "adverse_events": []}

    async def find(self, collection, predicate, *, limit, text_search=None):
        self.limits.append(limit)
        return [{"trial_id": f"CT-2024-{i:03d}"} for i in range(1, 4)][:limit]

    async def count(self, collection, predicate):
        assert predicate == RecordPredicate()
        return len(collection)

    async def get_trial(self, trial_id):
        return self.trial if trial_id == "CT-2024-001" else None


@pytest.mark.asyncio
async def test_list_trials_uses_page_size_by_default():
    store = FakeRecordStore()
    service = TrialService(store, page_size=2)
    assert len(await service.list_trials()) == 2
    await service.list_trials(limit=3)
    assert store.limits == [2, 3]


@pytest.mark.asyncio
async def test_trial_detail():
    service = TrialService(FakeRecordStore())
    detail = await service.get_trial_detail("CT-2024-001")
    assert detail["trial_id"] == "CT-2024-001"


@pytest.mark.asyncio
async def test_missing_trial_raises_not_found():
    service = TrialService(FakeRecordStore())
    with pytest.raises(EntityNotFoundError) as exc_info:
        await service.get_trial_detail("CT-1999-000")
    assert exc_info.value.entity_id == "CT-1999-000"


@pytest.mark.asyncio
async def test_collection_counts_cover_every_collection():
    counts = await TrialService(FakeRecordStore()).collection_counts()
    assert list(counts) == ["trials", "drugs", "sites", "participants", "adverseEvents"]
    assert counts["trials"] == 6
