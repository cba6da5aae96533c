"""
Schémas Pydantic pour la messagerie parents ↔ administration.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from portal.schemas.common import as_utc, not_blank


class MessageCreate(BaseModel):
    sender_id: int
    receiver_id: int
    content: str
    sent_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    attachment_name: Optional[str] = None
    attachment_url: Optional[str] = None

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        return not_blank(v, "Le message ne peut pas être vide.")


class MessageResponse(BaseModel):
    id: int
    sender_id: int
    receiver_id: int
    content: str
    sent_at: datetime
    attachment_name: Optional[str] = None
    attachment_url: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("sent_at")
    @classmethod
    def sent_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)
