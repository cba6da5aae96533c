"""
Schémas Pydantic pour les documents partagés avec les parents.
"""

from typing import Optional

from pydantic import BaseModel, field_validator

from portal.schemas.common import not_blank


class DocumentCreate(BaseModel):
    title: str
    description: str = ""
    url: str
    mime_type: Optional[str] = None

    @field_validator("title", "url")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return not_blank(v, "Le titre et l'URL du document sont obligatoires.")


class DocumentResponse(BaseModel):
    id: int
    title: str
    description: str
    url: str
    mime_type: Optional[str] = None

    model_config = {"from_attributes": True}
