"""
Schémas Pydantic pour les utilisateurs (administrateurs, parents, enseignants).
"""

from typing import Optional

from pydantic import BaseModel, field_validator

from portal.schemas.common import UserRole, not_blank


class UserCreate(BaseModel):
    name: str
    email: str
    role: UserRole = UserRole.PARENT
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        return not_blank(v, "Le nom ne peut pas être vide.")

    @field_validator("email")
    @classmethod
    def email_valid(cls, v: str) -> str:
        v = v.strip()
        if "@" not in v:
            raise ValueError("Adresse email invalide.")
        return v


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: UserRole
    phone: Optional[str] = None

    model_config = {"from_attributes": True}
