"""
Schémas Pydantic pour le journal des notifications.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator

from portal.schemas.common import NotificationType, as_utc


@dataclass(frozen=True)
class NotificationDraft:
    """Notification calculée par la dérivation, pas encore ajoutée au journal."""
    user_id: int
    message: str
    type: NotificationType = NotificationType.INFO
    link: Optional[str] = None


class NotificationResponse(BaseModel):
    id: int
    user_id: int
    message: str
    type: NotificationType
    read: bool = False
    created_at: datetime
    link: Optional[str] = None

    model_config = {"from_attributes": True}

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class ReadAck(BaseModel):
    success: bool
    updated: int = 0
