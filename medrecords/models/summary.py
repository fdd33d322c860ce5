from sqlalchemy import Column, ForeignKey, Integer, String, Text

from medrecords.db.database import Base
from medrecords.models.mixins import TimestampMixin


class Summary(TimestampMixin, Base):
    __tablename__ = "summaries"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    patient_id = Column(
        Integer, ForeignKey("patients.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    date_from = Column(String(10), nullable=True)  # YYYY-MM-DD
    date_to = Column(String(10), nullable=True)
