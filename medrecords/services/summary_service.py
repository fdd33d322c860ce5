"""
Summary service — CRUD over the ``summaries`` table.

Same shape as the note service: owner existence is left to the foreign key.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.models.mixins import utcnow
from medrecords.models.summary import Summary
from medrecords.schemas.summary import SummaryCreate, SummaryUpdate
from medrecords.services import RecordNotPersistedError

logger = logging.getLogger(__name__)


async def list_summaries(db: AsyncSession, patient_id: int | None = None) -> list[Summary]:
    query = select(Summary)
    if patient_id is not None:
        query = query.where(Summary.patient_id == patient_id)
    result = await db.execute(query.order_by(Summary.created_at.desc(), Summary.id.desc()))
    return list(result.scalars().all())


async def get_summary(db: AsyncSession, summary_id: int) -> Summary | None:
    return await db.get(Summary, summary_id, populate_existing=True)


async def create_summary(db: AsyncSession, payload: SummaryCreate) -> Summary:
    data = payload.model_dump()
    summary = Summary(
        patient_id=data["patient_id"],
        title=data["title"],
        content=data["content"],
        date_from=data.get("date_from"),
        date_to=data.get("date_to"),
    )
    db.add(summary)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    new_id = summary.id

    created = await get_summary(db, new_id)
    if created is None:
        raise RecordNotPersistedError("Failed to create summary")
    logger.info("Created summary %s for patient %s", new_id, created.patient_id)
    return created


async def update_summary(
    db: AsyncSession,
    summary_id: int,
    payload: SummaryUpdate,
) -> Summary | None:
    existing = await get_summary(db, summary_id)
    if existing is None:
        return None

    changes = payload.changes()
    if not changes:
        return existing

    await db.execute(
        update(Summary).where(Summary.id == summary_id).values(**changes, updated_at=utcnow())
    )
    await db.commit()
    logger.info("Updated summary %s: %s", summary_id, sorted(changes))
    return await get_summary(db, summary_id)


async def delete_summary(db: AsyncSession, summary_id: int) -> bool:
    result = await db.execute(delete(Summary).where(Summary.id == summary_id))
    await db.commit()
    deleted = result.rowcount > 0
    if deleted:
        logger.info("Deleted summary %s", summary_id)
    return deleted
