"""
Modèle SQLAlchemy pour les documents.
"""

from sqlalchemy import Column, Integer, String, Text

from portal.database import Base


class Document(Base):
    __tablename__ = "documents"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False, default="")
    url = Column(String(500), nullable=False)
    mime_type = Column(String(100), nullable=True)
