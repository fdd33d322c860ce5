"""
Patient summary API routes.

Endpoints:
    GET    /summaries             — List summaries, optionally ?patientId= filtered
    POST   /summaries             — Create a summary for a patient
    GET    /summaries/{id}        — Get summary by ID
    PUT    /summaries/{id}        — Partially update a summary
    DELETE /summaries/{id}        — Delete a summary
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
    SummaryCreate,
    SummarySchema,
    SummaryUpdate,
)
from medrecords.services import RecordNotPersistedError, patient_service, summary_service

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        401: {"model": ErrorResponse, "description": "Missing API key"},
        429: {"model": ErrorResponse, "description": "Rate limit exceeded"},
    },
)

summary_id_param = id_path("summary")


def _not_found(detail: str = "Summary not found") -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


def _internal(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=message)


@router.get(
    "/summaries",
    response_model=DataResponse[list[SummarySchema]],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def list_summaries(
    patient_id: Optional[int] = Depends(patient_filter),
    db: AsyncSession = Depends(get_db),
):
    """List summaries newest first. With ``patientId`` the patient must exist."""
    try:
        if patient_id is not None and not await patient_service.patient_exists(db, patient_id):
            raise _not_found("Patient not found")
        summaries = await summary_service.list_summaries(db, patient_id=patient_id)
    except SQLAlchemyError:
        logger.exception("Error fetching summaries")
        raise _internal("Failed to fetch summaries")
    return {"success": True, "data": [SummarySchema.model_validate(s) for s in summaries]}


@router.get(
    "/summaries/{id}",
    response_model=DataResponse[SummarySchema],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_summary(
    summary_id: int = Depends(summary_id_param),
    db: AsyncSession = Depends(get_db),
):
    try:
        summary = await summary_service.get_summary(db, summary_id)
    except SQLAlchemyError:
        logger.exception("Error fetching summary %s", summary_id)
        raise _internal("Failed to fetch summary")
    if summary is None:
        raise _not_found()
    return {"success": True, "data": SummarySchema.model_validate(summary)}


@router.post(
    "/summaries",
    response_model=DataResponse[SummarySchema],
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def create_summary(
    payload: SummaryCreate,
    db: AsyncSession = Depends(get_db),
):
    """Create a summary. An unknown ``patientId`` is rejected by the foreign key."""
    try:
        summary = await summary_service.create_summary(db, payload)
    except IntegrityError:
        logger.info("Rejected summary for unknown patient %s", payload.patient_id)
        raise _not_found("Patient not found")
    except (SQLAlchemyError, RecordNotPersistedError):
        logger.exception("Error creating summary")
        raise _internal("Failed to create summary")
    return {"success": True, "data": SummarySchema.model_validate(summary)}


@router.put(
    "/summaries/{id}",
    response_model=DataResponse[SummarySchema],
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def update_summary(
    payload: SummaryUpdate,
    summary_id: int = Depends(summary_id_param),
    db: AsyncSession = Depends(get_db),
):
    try:
        summary = await summary_service.update_summary(db, summary_id, payload)
    except SQLAlchemyError:
        logger.exception("Error updating summary %s", summary_id)
        raise _internal("Failed to update summary")
    if summary is None:
        raise _not_found()
    return {"success": True, "data": SummarySchema.model_validate(summary)}


@router.delete(
    "/summaries/{id}",
    response_model=MessageResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_summary(
    summary_id: int = Depends(summary_id_param),
    db: AsyncSession = Depends(get_db),
):
    try:
        deleted = await summary_service.delete_summary(db, summary_id)
    except SQLAlchemyError:
        logger.exception("Error deleting summary %s", summary_id)
        raise _internal("Failed to delete summary")
    if not deleted:
        raise _not_found()
    return {"success": True, "message": "Summary deleted successfully"}
