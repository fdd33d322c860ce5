"""
Patient service — CRUD over the ``patients`` table.

All public functions accept an ``AsyncSession`` so the caller (route layer)
owns the session. Inputs are assumed to be validated already. Writes are
committed here, then the row is re-read so callers always get the persisted
form including server-assigned timestamps.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.models.mixins import utcnow
from medrecords.models.patient import Patient
from medrecords.schemas.patient import PatientCreate, PatientUpdate
from medrecords.services import RecordNotPersistedError

logger = logging.getLogger(__name__)


async def list_patients(db: AsyncSession) -> list[Patient]:
    """All patients, newest first."""
    result = await db.execute(
        select(Patient).order_by(Patient.created_at.desc(), Patient.id.desc())
    )
    return list(result.scalars().all())


async def get_patient(db: AsyncSession, patient_id: int) -> Patient | None:
    """Return a single patient by primary key, or ``None``."""
    return await db.get(Patient, patient_id, populate_existing=True)


async def patient_exists(db: AsyncSession, patient_id: int) -> bool:
    result = await db.execute(select(Patient.id).where(Patient.id == patient_id))
    return result.scalar_one_or_none() is not None


async def create_patient(db: AsyncSession, payload: PatientCreate) -> Patient:
    """Insert a patient and return the canonical persisted row."""
    data = payload.model_dump()
    patient = Patient(
        first_name=data["first_name"],
        last_name=data["last_name"],
        date_of_birth=data["date_of_birth"],
        gender=data["gender"],
        email=data.get("email"),
        phone=data.get("phone"),
        address=data.get("address"),
    )
    db.add(patient)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    new_id = patient.id

    created = await get_patient(db, new_id)
    if created is None:
        raise RecordNotPersistedError("Failed to create patient")
    logger.info("Created patient %s", new_id)
    return created


async def update_patient(
    db: AsyncSession,
    patient_id: int,
    payload: PatientUpdate,
) -> Patient | None:
    """Partial update. Returns ``None`` when the patient does not exist.

    Only fields present in *payload* are written. An empty payload returns the
    existing row without touching ``updated_at``.
    """
    existing = await get_patient(db, patient_id)
    if existing is None:
        return None

    changes = payload.changes()
    if not changes:
        return existing

    await db.execute(
        update(Patient)
        .where(Patient.id == patient_id)
        .values(**changes, updated_at=utcnow())
    )
    await db.commit()
    logger.info("Updated patient %s: %s", patient_id, sorted(changes))
    return await get_patient(db, patient_id)


async def delete_patient(db: AsyncSession, patient_id: int) -> bool:
    """Hard delete. Notes and summaries go with it via ON DELETE CASCADE."""
    result = await db.execute(delete(Patient).where(Patient.id == patient_id))
    await db.commit()
    deleted = result.rowcount > 0
    if deleted:
        logger.info("Deleted patient %s", patient_id)
    return deleted
