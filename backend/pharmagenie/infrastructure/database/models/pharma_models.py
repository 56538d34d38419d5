"""SQLAlchemy ORM models for the five pharma record collections.

Filterable and searchable fields are real columns; the rest of each
record's nested structure lives in the JSON ``details`` column.
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import JSON, Boolean, DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from pharmagenie.infrastructure.database.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ClinicalTrialModel(Base):
    """ORM model — maps to the 'clinical_trials' table."""

    __tablename__ = "clinical_trials"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    trial_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    drug: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    phase: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Recruiting", index=True)
    indication: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    sponsor: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<ClinicalTrialModel(trial_id='{self.trial_id}', status='{self.status}')>"


class DrugModel(Base):
    """ORM model — maps to the 'drugs' table."""

    __tablename__ = "drugs"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    drug_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    drug_class: Mapped[str | None] = mapped_column(String(255), nullable=True)
    mechanism_of_action: Mapped[str | None] = mapped_column(Text, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<DrugModel(drug_id='{self.drug_id}', name='{self.name}')>"


class TrialSiteModel(Base):
    """ORM model — maps to the 'trial_sites' table."""

    __tablename__ = "trial_sites"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    site_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    state: Mapped[str | None] = mapped_column(String(120), nullable=True)
    country: Mapped[str] = mapped_column(String(120), nullable=False, index=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<TrialSiteModel(site_id='{self.site_id}', city='{self.city}')>"


class ParticipantModel(Base):
    """ORM model — maps to the 'participants' table."""

    __tablename__ = "participants"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    participant_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    trial_id: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    gender: Mapped[str | None] = mapped_column(String(40), nullable=True)
    age_group: Mapped[str | None] = mapped_column(String(20), nullable=True)
    enrollment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="Screening", index=True
    )
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<ParticipantModel(participant_id='{self.participant_id}')>"


class AdverseEventModel(Base):
    """ORM model — maps to the 'adverse_events' table."""

    __tablename__ = "adverse_events"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_id: Mapped[str] = mapped_column(String(20), unique=True, nullable=False, index=True)
    trial_id: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    participant_id: Mapped[str | None] = mapped_column(String(20), nullable=True, index=True)
    term: Mapped[str] = mapped_column(String(255), nullable=False)
    severity: Mapped[str] = mapped_column(String(40), nullable=False, index=True)
    is_serious: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    outcome_status: Mapped[str | None] = mapped_column(String(60), nullable=True)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, default=dict, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False
    )

    def __repr__(self) -> str:
        return f"<AdverseEventModel(event_id='{self.event_id}', severity='{self.severity}')>"
