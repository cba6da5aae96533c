"""
Router pour l'emploi du temps (remplacement en bloc par classe).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from portal.schemas.timetable import TimetableEntryDraft, TimetableEntryResponse
from portal.services import timetable_service
from portal.stores.base import EntityStore
from portal.stores.factory import get_store

router = APIRouter(prefix="/api/timetable", tags=["Emploi du temps"])


@router.get("", response_model=List[TimetableEntryResponse], summary="Lister les créneaux")
def list_timetable(
    classe: Optional[str] = Query(None, description="Filtrer par classe (insensible à la casse)"),
    store: EntityStore = Depends(get_store),
):
    return timetable_service.list_timetable(store, classe)


@router.post(
    "",
    response_model=List[TimetableEntryResponse],
    status_code=201,
    summary="Remplacer l'emploi du temps d'une classe",
)
def replace_timetable(
    entries: List[TimetableEntryDraft],
    classe: str = Query(..., description="Classe dont l'emploi du temps est remplacé"),
    store: EntityStore = Depends(get_store),
):
    """
    Remplace TOUS les créneaux de la classe par la liste fournie (éventuellement vide).

    - Transactionnel : en cas d'erreur, l'ancien emploi du temps reste intact
    - Les identifiants envoyés par le client sont ignorés ; ceux retournés font foi
    - Une notification par parent d'élève actif de la classe
    """
    return timetable_service.replace_timetable_for_class(store, classe, entries)
