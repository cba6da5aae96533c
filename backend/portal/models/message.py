"""
Modèle SQLAlchemy pour les messages.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text

from portal.database import Base


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    sender_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    receiver_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    sent_at = Column(DateTime(timezone=True), nullable=False)
    attachment_name = Column(String(255), nullable=True)
    attachment_url = Column(String(500), nullable=True)
