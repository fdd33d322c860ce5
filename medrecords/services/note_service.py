"""
Note service — CRUD over the ``notes`` table.

The owning patient is not looked up before insert; the foreign key
constraint rejects orphans with an ``IntegrityError``.
"""

from __future__ import annotations

import logging

from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.models.mixins import utcnow
from medrecords.models.note import Note
from medrecords.schemas.note import NoteCreate, NoteUpdate
from medrecords.services import RecordNotPersistedError

logger = logging.getLogger(__name__)


async def list_notes(db: AsyncSession, patient_id: int | None = None) -> list[Note]:
    """All notes newest first, optionally restricted to one patient."""
    query = select(Note)
    if patient_id is not None:
        query = query.where(Note.patient_id == patient_id)
    result = await db.execute(query.order_by(Note.created_at.desc(), Note.id.desc()))
    return list(result.scalars().all())


async def get_note(db: AsyncSession, note_id: int) -> Note | None:
    return await db.get(Note, note_id, populate_existing=True)


async def create_note(db: AsyncSession, payload: NoteCreate) -> Note:
    data = payload.model_dump()
    note = Note(
        patient_id=data["patient_id"],
        title=data["title"],
        content=data["content"],
        category=data.get("category"),
    )
    db.add(note)
    try:
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    new_id = note.id

    created = await get_note(db, new_id)
    if created is None:
        raise RecordNotPersistedError("Failed to create note")
    logger.info("Created note %s for patient %s", new_id, created.patient_id)
    return created


async def update_note(db: AsyncSession, note_id: int, payload: NoteUpdate) -> Note | None:
    """Partial update; ``None`` if the note does not exist."""
    existing = await get_note(db, note_id)
    if existing is None:
        return None

    changes = payload.changes()
    if not changes:
        return existing

    await db.execute(
        update(Note).where(Note.id == note_id).values(**changes, updated_at=utcnow())
    )
    await db.commit()
    logger.info("Updated note %s: %s", note_id, sorted(changes))
    return await get_note(db, note_id)


async def delete_note(db: AsyncSession, note_id: int) -> bool:
    result = await db.execute(delete(Note).where(Note.id == note_id))
    await db.commit()
    deleted = result.rowcount > 0
    if deleted:
        logger.info("Deleted note %s", note_id)
    return deleted
