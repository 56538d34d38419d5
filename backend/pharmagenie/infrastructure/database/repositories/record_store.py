"""RecordStore implementation backed by SQLAlchemy async sessions."""

import logging
from typing import Any

from sqlalchemy import ColumnElement, and_, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pharmagenie.application.interfaces.record_store import RecordStore
from pharmagenie.domain.entities.collections import (
    ADVERSE_EVENTS,
    DRUGS,
    PARTICIPANTS,
    SEARCHABLE_FIELDS,
    SITES,
    TRIALS,
)
from pharmagenie.domain.entities.query import FieldClause, RecordPredicate
from pharmagenie.infrastructure.database.base import Base
from pharmagenie.infrastructure.database.models import (
    AdverseEventModel,
    ClinicalTrialModel,
    DrugModel,
    ParticipantModel,
    TrialSiteModel,
)

logger = logging.getLogger(__name__)

COLLECTION_MODELS: dict[str, type[Base]] = {
    TRIALS: ClinicalTrialModel,
    DRUGS: DrugModel,
    SITES: TrialSiteModel,
    PARTICIPANTS: ParticipantModel,
    ADVERSE_EVENTS: AdverseEventModel,
}

_ORDER_COLUMNS: dict[str, str] = {
    TRIALS: "trial_id",
    DRUGS: "drug_id",
    SITES: "site_id",
    PARTICIPANTS: "participant_id",
    ADVERSE_EVENTS: "event_id",
}

_HIDDEN_COLUMNS = frozenset({"id", "details", "created_at"})


def _contains(column, value: Any) -> ColumnElement[bool]:
    """Case-insensitive substring match; LIKE wildcards in the value are literal."""
    escaped = (
        str(value).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )
    return column.ilike(f"%{escaped}%", escape="\\")


class SQLAlchemyRecordStore(RecordStore):
    """Implements the RecordStore port.

    Holds a session factory rather than a session: every read opens its own
    session, so concurrent reads for different collections never share one.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def find(
        self,
        collection: str,
        predicate: RecordPredicate,
        *,
        limit: int,
        text_search: str | None = None,
    ) -> list[dict[str, Any]]:
        model = self._model_for(collection)
        stmt = select(model)

        condition = self._predicate_condition(model, predicate)
        if condition is not None:
            stmt = stmt.where(condition)

        search_condition = self._text_search_condition(model, collection, text_search)
        if search_condition is not None:
            stmt = stmt.where(search_condition)

        stmt = stmt.order_by(getattr(model, _ORDER_COLUMNS[collection])).limit(limit)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            rows = result.scalars().all()

        logger.debug("find %s -> %d rows (limit=%d)", collection, len(rows), limit)
        return [self._to_record(row) for row in rows]

    async def count(self, collection: str, predicate: RecordPredicate) -> int:
        model = self._model_for(collection)
        stmt = select(func.count()).select_from(model)

        condition = self._predicate_condition(model, predicate)
        if condition is not None:
            stmt = stmt.where(condition)

        async with self._session_factory() as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def get_trial(self, trial_id: str) -> dict[str, Any] | None:
        async with self._session_factory() as session:
            trial = (
                await session.execute(
                    select(ClinicalTrialModel).where(ClinicalTrialModel.trial_id == trial_id)
                )
            ).scalar_one_or_none()
            if trial is None:
                return None

            site_ids = list((trial.details or {}).get("site_ids", []))
            sites = []
            if site_ids:
                sites = (
                    await session.execute(
                        select(TrialSiteModel)
                        .where(TrialSiteModel.site_id.in_(site_ids))
                        .order_by(TrialSiteModel.site_id)
                    )
                ).scalars().all()
            participants = (
                await session.execute(
                    select(ParticipantModel)
                    .where(ParticipantModel.trial_id == trial_id)
                    .order_by(ParticipantModel.participant_id)
                )
            ).scalars().all()
            events = (
                await session.execute(
                    select(AdverseEventModel)
                    .where(AdverseEventModel.trial_id == trial_id)
                    .order_by(AdverseEventModel.event_id)
                )
            ).scalars().all()

        record = self._to_record(trial)
        record["sites"] = [self._to_record(s) for s in sites]
        record["participants"] = [self._to_record(p) for p in participants]
        record["adverse_events"] = [self._to_record(e) for e in events]
        return record

    # ── Query building ───────────────────────────────────────────────

    @staticmethod
    def _model_for(collection: str) -> type[Base]:
        try:
            return COLLECTION_MODELS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection '{collection}'") from None

    @classmethod
    def _predicate_condition(
        cls, model: type[Base], predicate: RecordPredicate
    ) -> ColumnElement[bool] | None:
        conditions = [cls._clause_condition(model, c) for c in predicate.all_of]
        if predicate.any_of:
            conditions.append(
                or_(*(cls._clause_condition(model, c) for c in predicate.any_of))
            )
        if not conditions:
            return None
        return and_(*conditions)

    @staticmethod
    def _clause_condition(model: type[Base], clause: FieldClause) -> ColumnElement[bool]:
        column = getattr(model, clause.field_name, None)
        if column is None or clause.field_name in _HIDDEN_COLUMNS:
            raise ValueError(
                f"Unknown field '{clause.field_name}' for table '{model.__tablename__}'"
            )
        if clause.operator == "equals":
            return column == clause.value
        if clause.operator == "contains":
            # Case-insensitive partial match.
            return _contains(column, clause.value)
        raise ValueError(f"Unsupported operator '{clause.operator}'")

    @staticmethod
    def _text_search_condition(
        model: type[Base], collection: str, text_search: str | None
    ) -> ColumnElement[bool] | None:
        terms = (text_search or "").split()
        fields = SEARCHABLE_FIELDS.get(collection, ())
        if not terms or not fields:
            return None
        return or_(
            *(
                _contains(getattr(model, field_name), term)
                for field_name in fields
                for term in terms
            )
        )

    # ── Mapping ──────────────────────────────────────────────────────

    @staticmethod
    def _to_record(model: Base) -> dict[str, Any]:
        """Map ORM row → plain record dict (details first, columns win)."""
        record: dict[str, Any] = dict(getattr(model, "details", None) or {})
        for column in model.__table__.columns:
            if column.key in _HIDDEN_COLUMNS:
                continue
            record[column.key] = getattr(model, column.key)
        return record
