"""
Modèle SQLAlchemy pour le journal des notifications.

Journal en ajout seul : seule la colonne `read` est modifiée après insertion.
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text

from portal.database import Base


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    message = Column(Text, nullable=False)
    type = Column(String(10), nullable=False)  # success, error, info
    read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)
    link = Column(String(50), nullable=True)
