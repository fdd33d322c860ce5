"""
Shared route dependencies: identifier parsing and the API-key scheme.
"""

import re
from typing import Callable, Optional

from fastapi import HTTPException, Path, Query, Security, status
from fastapi.security import APIKeyHeader

from medrecords.schemas.common import MAX_ID

_INTEGER_RE = re.compile(r"-?[0-9]+")

# Documents the header in OpenAPI; RateLimitMiddleware does the enforcing
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def api_key(key: Optional[str] = Security(api_key_header)) -> Optional[str]:
    return key


def parse_id(raw: str, entity: str) -> int:
    """Strict base-10 parse of an identifier.

    Anything that is not an optionally signed run of ASCII digits is a 400.
    A well-formed number outside ``1..MAX_ID`` can never name a stored row,
    so it is a 404 without touching the database.
    """
    if not _INTEGER_RE.fullmatch(raw):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {entity} ID",
        )
    value = int(raw)
    if not 1 <= value <= MAX_ID:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity.capitalize()} not found",
        )
    return value


def id_path(entity: str) -> Callable:
    """Dependency resolving the ``{id}`` path segment for *entity*.

    Runs before body validation, so a bad id wins over a bad body.
    """

    async def _dependency(id: str = Path(..., description=f"{entity.capitalize()} ID")) -> int:
        return parse_id(id, entity)

    return _dependency


async def patient_filter(
    patient_id: Optional[str] = Query(
        None, alias="patientId", description="Only return records for this patient"
    ),
) -> Optional[int]:
    if patient_id is None or patient_id == "":
        return None
    return parse_id(patient_id, "patient")
