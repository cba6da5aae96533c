"""
Modèle SQLAlchemy pour le suivi des présences.
Le nombre d'absences d'un élève n'est jamais stocké : il est recompté à chaque écriture.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text

from portal.database import Base


class Attendance(Base):
    __tablename__ = "attendance"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    status = Column(String(30), nullable=False)  # Présent, Absent (Non justifié), Absent (Justifié), En retard
    justification = Column(Text, nullable=True)
