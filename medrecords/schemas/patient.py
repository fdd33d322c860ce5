from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from medrecords.models.patient import Gender
from medrecords.schemas.common import CamelModel, PartialUpdateModel, ISO_DATE_PATTERN


class PatientSchema(CamelModel):
    id: Optional[int] = Field(None, gt=0)
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[str] = None
    gender: Optional[Gender] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class PatientCreate(CamelModel):
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    date_of_birth: str = Field(..., pattern=ISO_DATE_PATTERN)
    gender: Gender
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=10)
    address: Optional[str] = None


class PatientUpdate(PartialUpdateModel):
    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    date_of_birth: Optional[str] = Field(None, pattern=ISO_DATE_PATTERN)
    gender: Optional[Gender] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, min_length=10)
    address: Optional[str] = None
