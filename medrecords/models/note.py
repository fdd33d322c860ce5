import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer, String, Text

from medrecords.db.database import Base
from medrecords.models.mixins import TimestampMixin


class NoteCategory(str, enum.Enum):
    CONSULTATION = "consultation"
    DIAGNOSIS = "diagnosis"
    TREATMENT = "treatment"
    GENERAL = "general"


class Note(TimestampMixin, Base):
    __tablename__ = "notes"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(
        Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    category = Column(
        Enum(NoteCategory, values_callable=lambda e: [m.value for m in e], name="note_category"),
        nullable=True,
    )
