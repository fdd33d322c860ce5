import enum

from sqlalchemy import Column, Enum, Integer, String

from medrecords.db.database import Base
from medrecords.models.mixins import TimestampMixin


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Patient(TimestampMixin, Base):
    __tablename__ = "patients"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    date_of_birth = Column(String(10), nullable=False)  # YYYY-MM-DD, kept verbatim
    gender = Column(Enum(Gender, values_callable=lambda e: [m.value for m in e], name="gender"), nullable=False)
    email = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
