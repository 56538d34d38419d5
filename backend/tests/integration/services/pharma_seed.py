"""Throwaway SQLite database seeded with a small pharma dataset."""

from pathlib import Path

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from pharmagenie.infrastructure.database.base import Base
from pharmagenie.infrastructure.database.models import (
    AdverseEventModel,
    ClinicalTrialModel,
    DrugModel,
    ParticipantModel,
    TrialSiteModel,
)


def _rows() -> list[Base]:
    return [
        ClinicalTrialModel(
            trial_id="CT-2024-001",
            title="Glucose control in adults",
            drug="ABC123",
            phase="Phase II",
            status="Recruiting",
            indication="Diabetes",
            sponsor="Acme Pharma",
            details={
                "site_ids": ["SITE-001", "SITE-002"],
                "current_enrollment": 40,
                "enrollment_target": 100,
            },
        ),
        ClinicalTrialModel(
            trial_id="CT-2024-002",
            title="Blood pressure outcomes",
            drug="XYZ789",
            phase="Phase III",
            status="Active",
            indication="Hypertension",
            sponsor="Beta Bio",
            details={"site_ids": ["SITE-002"]},
        ),
        ClinicalTrialModel(
            trial_id="CT-2024-003",
            title="Memory decline prevention",
            drug="DEF456",
            phase="Phase III",
            status="Completed",
            indication="Alzheimer",
            details={},
        ),
        DrugModel(
            drug_id="ABC123",
            name="Glucomax",
            drug_class="Biguanide",
            details={"approval_status": {"fda": {"approved": True}}},
        ),
        DrugModel(drug_id="XYZ789", name="Pressurex", drug_class="ACE inhibitor"),
        TrialSiteModel(site_id="SITE-001", name="Boston General", city="Boston", country="USA"),
        TrialSiteModel(site_id="SITE-002", name="Charite", city="Berlin", country="Germany"),
        ParticipantModel(
            participant_id="P-001", trial_id="CT-2024-001", gender="Female",
            enrollment_status="Active", details={"age": 54},
        ),
        ParticipantModel(
            participant_id="P-002", trial_id="CT-2024-001", gender="Male",
            enrollment_status="Completed",
        ),
        ParticipantModel(
            participant_id="P-003", trial_id="CT-2024-002", gender="Female",
            enrollment_status="Active",
        ),
        AdverseEventModel(
            event_id="AE-001", trial_id="CT-2024-001", participant_id="P-001",
            term="Nausea", severity="Mild", is_serious=False,
        ),
        AdverseEventModel(
            event_id="AE-002", trial_id="CT-2024-002", participant_id="P-003",
            term="Syncope", severity="Severe", is_serious=True,
        ),
    ]


async def create_seeded_database(
    path: Path,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    """Create the schema in a file-backed SQLite database and load the rows.

    A file (not ``:memory:``) keeps every pooled connection on the same data.
    """
    engine = create_async_engine(f"sqlite+aiosqlite:///{path}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        session.add_all(_rows())
        await session.commit()
    return engine, session_factory
