"""Application service for direct clinical-trial lookups."""

from typing import Any

from pharmagenie.application.interfaces.record_store import RecordStore
from pharmagenie.domain.entities.collections import ALL_COLLECTIONS, TRIALS
from pharmagenie.domain.entities.query import RecordPredicate
from pharmagenie.domain.exceptions import EntityNotFoundError


class TrialService:
    """Lists trials and resolves single-trial details."""

    def __init__(self, record_store: RecordStore, *, page_size: int = 50):
        self._store = record_store
        self._page_size = page_size

    async def list_trials(self, limit: int | None = None) -> list[dict[str, Any]]:
        return await self._store.find(
            TRIALS, RecordPredicate(), limit=limit or self._page_size
        )

    async def get_trial_detail(self, trial_id: str) -> dict[str, Any]:
        trial = await self._store.get_trial(trial_id)
        if trial is None:
            raise EntityNotFoundError("Trial", trial_id)
        return trial

    async def collection_counts(self) -> dict[str, int]:
        """Unfiltered record count for every collection."""
        return {
            name: await self._store.count(name, RecordPredicate())
            for name in ALL_COLLECTIONS
        }
