"""
Modèle SQLAlchemy pour l'emploi du temps.
Les créneaux d'une classe sont toujours remplacés en bloc (voir timetable_service).
"""

from sqlalchemy import Column, Integer, String

from portal.database import Base


class TimetableEntry(Base):
    __tablename__ = "timetable_entries"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    day = Column(String(10), nullable=False)  # Lundi … Vendredi
    time_range = Column(String(30), nullable=False)
    subject = Column(String(100), nullable=False)
    teacher = Column(String(200), nullable=False, default="")
    class_label = Column(String(50), nullable=False, index=True)
