"""
Schémas Pydantic pour les observations sur un élève.
"""

import datetime as dt

from pydantic import BaseModel, field_validator

from portal.schemas.common import not_blank


class ObservationCreate(BaseModel):
    student_id: int
    date: dt.date
    content: str
    author: str = "Administration"

    @field_validator("content")
    @classmethod
    def content_not_empty(cls, v: str) -> str:
        return not_blank(v, "L'observation ne peut pas être vide.")

    @field_validator("author")
    @classmethod
    def default_author(cls, v: str) -> str:
        return v.strip() or "Administration"


class ObservationResponse(BaseModel):
    id: int
    student_id: int
    date: dt.date
    content: str
    author: str

    model_config = {"from_attributes": True}
