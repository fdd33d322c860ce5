from medrecords.models.patient import Patient, Gender
from medrecords.models.note import Note, NoteCategory
from medrecords.models.summary import Summary

__all__ = [
    "Patient",
    "Gender",
    "Note",
    "NoteCategory",
    "Summary",
]
