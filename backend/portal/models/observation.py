"""
Modèle SQLAlchemy pour les observations.
"""

from sqlalchemy import Column, Date, ForeignKey, Integer, String, Text

from portal.database import Base


class Observation(Base):
    __tablename__ = "observations"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    date = Column(Date, nullable=False)
    content = Column(Text, nullable=False)
    author = Column(String(100), nullable=False, default="Administration")
