"""
Schémas Pydantic pour les élèves.
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel, field_validator

from portal.schemas.common import not_blank


class StudentCreate(BaseModel):
    last_name: str
    first_name: str
    birth_date: dt.date
    class_label: str
    school_level: Optional[str] = None
    parent_id: int
    is_archived: bool = False
    photo_url: Optional[str] = None

    @field_validator("last_name", "first_name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return not_blank(v, "Le nom et le prénom sont obligatoires.")

    @field_validator("class_label")
    @classmethod
    def class_not_empty(cls, v: str) -> str:
        # La classe est conservée telle que saisie ; seule la comparaison est normalisée
        if not v.strip():
            raise ValueError("La classe est obligatoire.")
        return v


class StudentResponse(BaseModel):
    id: int
    last_name: str
    first_name: str
    birth_date: dt.date
    class_label: str
    school_level: Optional[str] = None
    parent_id: int
    is_archived: bool = False
    photo_url: Optional[str] = None

    model_config = {"from_attributes": True}
