"""
Router pour le journal des notifications (lecture par interrogation + accusés de lecture).
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from portal.schemas.notification import NotificationResponse, ReadAck
from portal.services import notification_service
from portal.stores.base import EntityStore
from portal.stores.factory import get_store

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=List[NotificationResponse], summary="Lister les notifications")
def list_notifications(
    user_id: Optional[int] = Query(None, description="Limiter aux notifications d'un utilisateur"),
    store: EntityStore = Depends(get_store),
):
    """Les plus récentes d'abord. Sans user_id : toutes les notifications (vue admin)."""
    return notification_service.list_notifications(store, user_id)


@router.post("/{notification_id}/read", response_model=ReadAck, summary="Marquer comme lue")
def mark_read(notification_id: int, store: EntityStore = Depends(get_store)):
    if not notification_service.mark_notification_read(store, notification_id):
        raise HTTPException(status_code=404, detail="Notification introuvable.")
    return ReadAck(success=True, updated=1)


@router.post("/user/{user_id}/read-all", response_model=ReadAck, summary="Tout marquer comme lu")
def mark_all_read(user_id: int, store: EntityStore = Depends(get_store)):
    """Idempotent : un second appel retourne updated=0."""
    updated = notification_service.mark_all_read(store, user_id)
    return ReadAck(success=True, updated=updated)
