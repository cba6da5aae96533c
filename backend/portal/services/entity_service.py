"""
Service d'écriture des entités : point d'entrée unique des écrans CRUD.

commit_entity :
1. Valide le payload (ValidationError, rien n'est écrit)
2. Enregistre l'entité (ReferentialError / ConflictError remontées à l'appelant)
3. Dérive les notifications sur l'état post-commit et les ajoute au journal —
   tout échec de cette étape est journalisé et n'annule jamais l'entité

Les mises à jour et suppressions ne déclenchent aucune notification.
"""

import logging
from typing import List, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from portal.config import settings
from portal.exceptions import DerivationFailure, ValidationError
from portal.schemas.common import EntityKind
from portal.schemas.registry import CREATE_SCHEMAS
from portal.services import derivation, notification_service
from portal.stores.base import EntityStore

logger = logging.getLogger(__name__)

# Ces collections ont leur propre point d'entrée (timetable_service, notification_service)
NOT_COMMITTABLE = {EntityKind.TIMETABLE, EntityKind.NOTIFICATIONS}


def validate_payload(kind: EntityKind, payload: Union[BaseModel, dict]) -> BaseModel:
    schema = CREATE_SCHEMAS[kind]
    if isinstance(payload, schema):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump()
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Données invalides pour {kind.value}.",
            exc.errors(include_url=False, include_context=False, include_input=False),
        ) from exc


def commit_entity(
    store: EntityStore,
    kind: Union[EntityKind, str],
    payload: Union[BaseModel, dict],
    absence_threshold: Optional[int] = None,
) -> BaseModel:
    """Enregistre une nouvelle entité puis notifie les parents concernés."""
    kind = EntityKind(kind)
    if kind in NOT_COMMITTABLE:
        raise ValidationError(f"La collection {kind.value} ne s'écrit pas par commit_entity.")

    data = validate_payload(kind, payload)

    if kind == EntityKind.MENUS:
        existing = store.list(EntityKind.MENUS, date=data.date)
        if existing:
            # Un seul menu par jour : on remplace celui qui existe
            logger.info("Menu du %s mis à jour (#%s)", data.date, existing[0].id)
            return store.update(EntityKind.MENUS, existing[0].id, data.model_dump())

    stored = store.insert(kind, data.model_dump())
    logger.info("%s #%s enregistré", kind.value, stored.id)

    threshold = absence_threshold if absence_threshold is not None else settings.ABSENCE_ALERT_THRESHOLD
    _derive_and_publish(store, kind, stored, threshold)
    return stored


def update_entity(
    store: EntityStore, kind: Union[EntityKind, str], entity_id: int, payload: Union[BaseModel, dict]
) -> Optional[BaseModel]:
    """Remplace tous les champs d'une entité. Retourne None si elle n'existe pas."""
    kind = EntityKind(kind)
    if kind in NOT_COMMITTABLE:
        raise ValidationError(f"La collection {kind.value} ne se modifie pas directement.")
    data = validate_payload(kind, payload)
    return store.update(kind, entity_id, data.model_dump())


def delete_entity(store: EntityStore, kind: Union[EntityKind, str], entity_id: int) -> bool:
    """
    Supprime une entité. Retourne False si elle n'existe pas.
    Un parent encore référencé par un élève ne peut pas être supprimé (ConflictError).
    """
    kind = EntityKind(kind)
    deleted = store.delete(kind, entity_id)
    if deleted:
        logger.info("%s #%s supprimé", kind.value, entity_id)
    return deleted


def list_entities(store: EntityStore, kind: Union[EntityKind, str]) -> List[BaseModel]:
    return store.list(EntityKind(kind))


def _derive_and_publish(store: EntityStore, kind: EntityKind, stored: BaseModel, threshold: int) -> None:
    try:
        drafts = derivation.derive_notifications(store, kind, stored, absence_threshold=threshold)
    except DerivationFailure as exc:
        logger.warning("Aucune notification pour %s #%s : %s", kind.value, stored.id, exc)
        return
    except Exception as exc:
        logger.error("Dérivation échouée pour %s #%s : %s", kind.value, stored.id, exc, exc_info=True)
        return
    notification_service.publish(store, drafts)
