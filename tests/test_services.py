"""
Service layer tests with a mocked session.

- create_* rolls the session back when the commit fails
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from medrecords.schemas import NoteCreate, PatientCreate, SummaryCreate
from medrecords.services import note_service, patient_service, summary_service


def _failing_session() -> AsyncMock:
    db = AsyncMock()
    db.add = MagicMock()
    db.commit.side_effect = OperationalError("COMMIT", {}, Exception("database is locked"))
    return db


class TestCreateRollsBackOnFailedCommit:

    @pytest.mark.asyncio
    async def test_patient(self):
        db = _failing_session()
        payload = PatientCreate(
            first_name="Alice", last_name="Johnson", date_of_birth="1992-03-10", gender="female"
        )

        with pytest.raises(OperationalError):
            await patient_service.create_patient(db, payload)

        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_note(self):
        db = _failing_session()

        with pytest.raises(OperationalError):
            await note_service.create_note(db, NoteCreate(patient_id=1, title="Visit", content="Routine"))

        db.rollback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_summary(self):
        db = _failing_session()

        with pytest.raises(OperationalError):
            await summary_service.create_summary(db, SummaryCreate(patient_id=1, title="Q1", content="Stable"))

        db.rollback.assert_awaited_once()
