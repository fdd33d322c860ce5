from medrecords.schemas.common import (
    DataResponse,
    ErrorResponse,
    MessageResponse,
    ValidationIssue,
)
from medrecords.schemas.patient import PatientSchema, PatientCreate, PatientUpdate
from medrecords.schemas.note import NoteSchema, NoteCreate, NoteUpdate
from medrecords.schemas.summary import SummarySchema, SummaryCreate, SummaryUpdate

__all__ = [
    "DataResponse",
    "ErrorResponse",
    "MessageResponse",
    "ValidationIssue",
    "PatientSchema",
    "PatientCreate",
    "PatientUpdate",
    "NoteSchema",
    "NoteCreate",
    "NoteUpdate",
    "SummarySchema",
    "SummaryCreate",
    "SummaryUpdate",
]
