from datetime import datetime
from typing import Optional

from pydantic import Field

from medrecords.models.note import NoteCategory
from medrecords.schemas.common import MAX_ID, CamelModel, PartialUpdateModel


class NoteSchema(CamelModel):
    id: Optional[int] = Field(None, gt=0)
    patient_id: Optional[int] = None
    title: Optional[str] = None
    content: Optional[str] = None
    category: Optional[NoteCategory] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class NoteCreate(CamelModel):
    patient_id: int = Field(..., gt=0, le=MAX_ID, strict=True)
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    category: Optional[NoteCategory] = None


class NoteUpdate(PartialUpdateModel):
    # patient_id is fixed at creation
    title: Optional[str] = Field(None, min_length=1)
    content: Optional[str] = Field(None, min_length=1)
    category: Optional[NoteCategory] = None
