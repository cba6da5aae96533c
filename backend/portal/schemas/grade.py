"""
Schémas Pydantic pour les notes (barème sur 20).
"""

import datetime as dt

from pydantic import BaseModel, field_validator

from portal.schemas.common import not_blank


class GradeCreate(BaseModel):
    student_id: int
    subject: str
    score: float
    coefficient: float = 1
    period: str
    date: dt.date

    @field_validator("subject", "period")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return not_blank(v, "La matière et la période sont obligatoires.")

    @field_validator("score")
    @classmethod
    def score_in_range(cls, v: float) -> float:
        if not 0 <= v <= 20:
            raise ValueError("La note doit être comprise entre 0 et 20.")
        return v

    @field_validator("coefficient")
    @classmethod
    def coefficient_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Le coefficient doit être strictement positif.")
        return v


class GradeResponse(BaseModel):
    id: int
    student_id: int
    subject: str
    score: float
    coefficient: float
    period: str
    date: dt.date

    model_config = {"from_attributes": True}
