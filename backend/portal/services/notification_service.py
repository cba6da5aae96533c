"""
Journal des notifications : ajout après dérivation, lecture par interrogation, accusés de lecture.
"""

import logging
from typing import Iterable, List, Optional

from portal.schemas.notification import NotificationDraft, NotificationResponse
from portal.stores.base import EntityStore

logger = logging.getLogger(__name__)


def publish(store: EntityStore, drafts: Iterable[NotificationDraft]) -> List[NotificationResponse]:
    """
    Ajoute chaque notification au journal, une par une.

    Un échec d'ajout est journalisé puis ignoré : l'entité à l'origine de la
    notification est déjà enregistrée et ne doit pas être annulée. Les autres
    notifications du lot sont tout de même ajoutées.
    """
    published: List[NotificationResponse] = []
    failed = 0
    for draft in drafts:
        try:
            published.append(store.append_notification(draft))
        except Exception as exc:
            failed += 1
            logger.error(
                "Notification non ajoutée pour l'utilisateur %s : %s", draft.user_id, exc, exc_info=True,
            )
    if failed:
        logger.warning("%d notification(s) perdue(s) sur %d", failed, failed + len(published))
    return published


def list_notifications(store: EntityStore, user_id: Optional[int] = None) -> List[NotificationResponse]:
    """Toutes les notifications (vue admin) ou celles d'un utilisateur, les plus récentes d'abord."""
    return store.list_notifications(user_id)


def mark_notification_read(store: EntityStore, notification_id: int) -> bool:
    """Retourne False si la notification n'existe pas."""
    return store.mark_notification_read(notification_id)


def mark_all_read(store: EntityStore, user_id: int) -> int:
    """Idempotent : un second appel ne modifie plus rien et retourne 0."""
    updated = store.mark_all_read(user_id)
    logger.debug("Utilisateur %s : %d notification(s) marquée(s) lue(s)", user_id, updated)
    return updated
