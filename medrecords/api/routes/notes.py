"""
Clinical note API routes.

Endpoints:
    GET    /notes         — List notes, optionally ?patientId= filtered
    POST   /notes         — Create a note for a patient
    GET    /notes/{id}    — Get note by ID
    PUT    /notes/{id}    — Partially update a note
    DELETE /notes/{id}    — Delete a note
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.api.deps import id_path, patient_filter
from medrecords.db.database import get_db
from medrecords.schemas import (
    DataResponse,
    ErrorResponse,
    MessageResponse,
    NoteCreate,
    NoteSchema,
    NoteUpdate,
)
from medrecords.services import RecordNotPersistedError, note_service, patient_service

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "Missing API key"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)

note_id_param = id_path("note")


def _not_found(detail: str = "Note not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _internal(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get(
    "/notes",
    response_model=DataResponse[list[NoteSchema]],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def list_notes(
    patient_id: Optional[int] = Depends(patient_filter),
    db: AsyncSession = Depends(get_db),
):
    """List notes newest first. With ``patientId`` the patient must exist."""
    try:
        if patient_id is not None and not await patient_service.patient_exists(db, patient_id):
            raise _not_found("Patient not found")
        notes = await note_service.list_notes(db, patient_id=patient_id)
    except SQLAlchemyError:
        logger.exception("Error fetching notes")
        raise _internal("Failed to fetch notes")
    return {"success": True, "data": [NoteSchema.model_validate(n) for n in notes]}


@router.get(
    "/notes/{id}",
    response_model=DataResponse[NoteSchema],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_note(
    note_id: int = Depends(note_id_param),
    db: AsyncSession = Depends(get_db),
):
    try:
        note = await note_service.get_note(db, note_id)
    except SQLAlchemyError:
        logger.exception("Error fetching note %s", note_id)
        raise _internal("Failed to fetch note")
    if note is None:
        raise _not_found()
    return {"success": True, "data": NoteSchema.model_validate(note)}


@router.post(
    "/notes",
    response_model=DataResponse[NoteSchema],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_note(
    payload: NoteCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a note. An unknown ``patientId`` is rejected by the foreign key."""
    try:
        note = await note_service.create_note(db, payload)
    except IntegrityError:
        logger.info("Rejected note for unknown patient %s", payload.patient_id)
        raise _not_found("Patient not found")
    except (SQLAlchemyError, RecordNotPersistedError):
        logger.exception("Error creating note")
        raise _internal("Failed to create note")
    return {"success": True, "data": NoteSchema.model_validate(note)}


@router.put(
    "/notes/{id}",
    response_model=DataResponse[NoteSchema],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_note(
    payload: NoteUpdate,
    note_id: int = Depends(note_id_param),
    db: AsyncSession = Depends(get_db),
):
    try:
        note = await note_service.update_note(db, note_id, payload)
    except SQLAlchemyError:
        logger.exception("Error updating note %s", note_id)
        raise _internal("Failed to update note")
    if note is None:
        raise _not_found()
    return {"success": True, "data": NoteSchema.model_validate(note)}


@router.delete(
    "/notes/{id}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_note(
    note_id: int = Depends(note_id_param),
    db: AsyncSession = Depends(get_db),
):
    try:
        deleted = await note_service.delete_note(db, note_id)
    except SQLAlchemyError:
        logger.exception("Error deleting note %s", note_id)
        raise _internal("Failed to delete note")
    if not deleted:
        raise _not_found()
    return {"success": True, "message": "Note deleted successfully"}
