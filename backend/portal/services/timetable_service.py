"""
Remplacement transactionnel de l'emploi du temps d'une classe.

Étapes :
1. Valider la classe et tous les créneaux (aucune écriture si un créneau est invalide)
2. Dans une seule transaction : supprimer les créneaux existants de la classe
   (comparaison trim + minuscules) puis insérer les nouveaux, étiquetés avec
   la classe telle que saisie par l'appelant
3. Après le commit : une seule notification par parent distinct d'un élève actif
   de la classe, quel que soit le nombre de créneaux — même si la liste est vide
4. Retourner les créneaux insérés avec leurs nouveaux identifiants
"""

import logging
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError as PydanticValidationError

from portal.exceptions import ValidationError
from portal.schemas.common import EntityKind, NotificationType, normalize_class_label
from portal.schemas.notification import NotificationDraft
from portal.schemas.timetable import TimetableEntryDraft, TimetableEntryResponse
from portal.services import notification_service
from portal.stores.base import EntityStore

logger = logging.getLogger(__name__)


def list_timetable(store: EntityStore, class_label: Optional[str] = None) -> List[TimetableEntryResponse]:
    """Tous les créneaux, ou ceux d'une classe (comparaison insensible à la casse et aux espaces)."""
    entries = store.list(EntityKind.TIMETABLE)
    if class_label is None:
        return entries
    normalized = normalize_class_label(class_label)
    return [e for e in entries if normalize_class_label(e.class_label) == normalized]


def replace_timetable_for_class(
    store: EntityStore,
    class_label: str,
    entries: Sequence[Union[TimetableEntryDraft, dict]],
) -> List[TimetableEntryResponse]:
    """
    Remplace tous les créneaux de la classe. Lève ValidationError avant toute écriture
    si la classe ou un créneau est invalide, TransactionFailure si l'écriture échoue.
    """
    if not class_label or not class_label.strip():
        raise ValidationError("La classe est requise.")

    drafts = [_as_draft(entry, index) for index, entry in enumerate(entries)]
    stored = store.replace_by_key(
        EntityKind.TIMETABLE, "class_label", class_label, [d.model_dump() for d in drafts],
    )
    logger.info("Emploi du temps de la classe %s remplacé : %d créneaux", class_label, len(stored))

    _notify_parents(store, class_label)
    return stored


def _notify_parents(store: EntityStore, class_label: str) -> None:
    try:
        parent_ids = store.parent_ids_for_class(class_label)
    except Exception as exc:
        logger.error("Parents de la classe %s introuvables : %s", class_label, exc, exc_info=True)
        return
    notification_service.publish(store, [
        NotificationDraft(
            user_id=parent_id,
            message=f"L'emploi du temps pour la classe {class_label} a été mis à jour.",
            type=NotificationType.INFO,
            link="suivi",
        )
        for parent_id in parent_ids
    ])


def _as_draft(entry: Union[TimetableEntryDraft, dict], index: int) -> TimetableEntryDraft:
    if isinstance(entry, TimetableEntryDraft):
        return entry
    try:
        return TimetableEntryDraft.model_validate(entry)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Créneau n°{index + 1} invalide.",
            exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc
