"""
Patient API routes.

Endpoints:
    GET    /patients       — List all patients, newest first
    POST   /patients       — Create a patient
    GET    /patients/{id}  — Get patient by ID
    PUT    /patients/{id}  — Partially update a patient
    DELETE /patients/{id}  — Delete a patient and, by cascade, their notes and summaries
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from medrecords.api.deps import id_path
from medrecords.db.database import get_db
from medrecords.schemas import (
    DataResponse,
    ErrorResponse,
    MessageResponse,
    PatientCreate,
    PatientSchema,
    PatientUpdate,
)
from medrecords.services import RecordNotPersistedError, patient_service

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "Missing API key"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)

patient_id_param = id_path("patient")


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found")


def _internal(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/patients", response_model=DataResponse[list[PatientSchema]])
async def list_patients(db: AsyncSession = Depends(get_db)):
    """List all patients ordered by creation time, newest first."""
    try:
        patients = await patient_service.list_patients(db)
    except SQLAlchemyError:
        logger.exception("Error fetching patients")
        raise _internal("Failed to fetch patients")
    return {"success": True, "data": [PatientSchema.model_validate(p) for p in patients]}


@router.get(
    "/patients/{id}",
    response_model=DataResponse[PatientSchema],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_patient(
    patient_id: int = Depends(patient_id_param),
    db: AsyncSession = Depends(get_db),
):
    try:
        patient = await patient_service.get_patient(db, patient_id)
    except SQLAlchemyError:
        logger.exception("Error fetching patient %s", patient_id)
        raise _internal("Failed to fetch patient")
    if patient is None:
        raise _not_found()
    return {"success": True, "data": PatientSchema.model_validate(patient)}


@router.post(
    "/patients",
    response_model=DataResponse[PatientSchema],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}},
)
async def create_patient(
    payload: PatientCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a patient. Optional fields that are omitted are stored as null."""
    try:
        patient = await patient_service.create_patient(db, payload)
    except (SQLAlchemyError, RecordNotPersistedError):
        logger.exception("Error creating patient")
        raise _internal("Failed to create patient")
    return {"success": True, "data": PatientSchema.model_validate(patient)}


@router.put(
    "/patients/{id}",
    response_model=DataResponse[PatientSchema],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_patient(
    payload: PatientUpdate,
    patient_id: int = Depends(patient_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Update only the supplied fields. An empty body returns the patient unchanged."""
    try:
        patient = await patient_service.update_patient(db, patient_id, payload)
    except SQLAlchemyError:
        logger.exception("Error updating patient %s", patient_id)
        raise _internal("Failed to update patient")
    if patient is None:
        raise _not_found()
    return {"success": True, "data": PatientSchema.model_validate(patient)}


@router.delete(
    "/patients/{id}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_patient(
    patient_id: int = Depends(patient_id_param),
    db: AsyncSession = Depends(get_db),
):
    """Delete a patient. Their notes and summaries are removed by the database."""
    try:
        deleted = await patient_service.delete_patient(db, patient_id)
    except SQLAlchemyError:
        logger.exception("Error deleting patient %s", patient_id)
        raise _internal("Failed to delete patient")
    if not deleted:
        raise _not_found()
    return {"success": True, "message": "Patient deleted successfully"}
