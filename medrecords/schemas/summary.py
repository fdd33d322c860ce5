from datetime import datetime
from typing import Optional

from pydantic import Field

from medrecords.schemas.common import ISO_DATE_PATTERN, MAX_ID, CamelModel, PartialUpdateModel


class SummarySchema(CamelModel):
    id: Optional[int] = Field(None, gt=0)
    patient_id: Optional[int] = None
    title: Optional[str] = None
    content: Optional[str] = None
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SummaryCreate(CamelModel):
    patient_id: int = Field(..., gt=0, le=MAX_ID, strict=True)
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    date_from: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    date_to: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)


class SummaryUpdate(PartialUpdateModel):
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    date_from: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    date_to: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
