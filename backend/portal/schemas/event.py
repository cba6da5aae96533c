"""
Schémas Pydantic pour les événements de l'école.
"""

import datetime as dt

from pydantic import BaseModel, field_validator

from portal.schemas.common import not_blank


class EventCreate(BaseModel):
    title: str
    description: str = ""
    event_date: dt.date

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v: str) -> str:
        return not_blank(v, "Le titre de l'événement est obligatoire.")


class EventResponse(BaseModel):
    id: int
    title: str
    description: str
    event_date: dt.date

    model_config = {"from_attributes": True}
