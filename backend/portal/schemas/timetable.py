"""
Schémas Pydantic pour l'emploi du temps d'une classe.

Les brouillons envoyés par le client n'ont pas d'identifiant fiable :
un éventuel `id` temporaire ou une `class_label` divergente sont ignorés,
la classe canonique est celle du remplacement.
"""

from pydantic import BaseModel, field_validator

from portal.schemas.common import Weekday, not_blank


class TimetableEntryDraft(BaseModel):
    day: Weekday
    time_range: str
    subject: str
    teacher: str

    @field_validator("time_range", "subject")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return not_blank(v, "L'horaire et la matière sont obligatoires.")

    @field_validator("teacher")
    @classmethod
    def strip_teacher(cls, v: str) -> str:
        return v.strip()


class TimetableEntryResponse(BaseModel):
    id: int
    day: Weekday
    time_range: str
    subject: str
    teacher: str
    class_label: str

    model_config = {"from_attributes": True}
