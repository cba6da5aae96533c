"""
Résolution des destinataires et mise en forme partagées par les règles de dérivation.
"""

import datetime as dt

from portal.exceptions import DerivationFailure
from portal.schemas.common import EntityKind
from portal.schemas.student import StudentResponse
from portal.schemas.user import UserResponse
from portal.stores.base import EntityStore


def resolve_student(store: EntityStore, student_id: int) -> StudentResponse:
    """Retourne l'élève ou lève DerivationFailure s'il a disparu entre-temps."""
    student = store.get(EntityKind.STUDENTS, student_id)
    if student is None:
        raise DerivationFailure(f"Élève {student_id} introuvable.")
    return student


def resolve_user(store: EntityStore, user_id: int) -> UserResponse:
    user = store.get(EntityKind.USERS, user_id)
    if user is None:
        raise DerivationFailure(f"Utilisateur {user_id} introuvable.")
    return user


def format_date(value: dt.date) -> str:
    """Format français JJ/MM/AAAA."""
    return value.strftime("%d/%m/%Y")


def format_score(score: float) -> str:
    return f"{score:g}"
