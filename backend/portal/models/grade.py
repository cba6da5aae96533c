"""
Modèle SQLAlchemy pour les notes.
"""

from sqlalchemy import Column, Date, Float, ForeignKey, Integer, String

from portal.database import Base


class Grade(Base):
    __tablename__ = "grades"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    subject = Column(String(100), nullable=False)
    score = Column(Float, nullable=False)  # sur 20
    coefficient = Column(Float, nullable=False, default=1)
    period = Column(String(50), nullable=False)
    date = Column(Date, nullable=False)
