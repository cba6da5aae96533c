"""
Modèle SQLAlchemy pour les événements de l'école.
"""

from sqlalchemy import Column, Date, Integer, String, Text

from portal.database import Base


class Event(Base):
    __tablename__ = "events"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    event_date = Column(Date, nullable=False)
