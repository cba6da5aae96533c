"""
Routers CRUD génériques pour les collections du portail.

Les créations passent par entity_service.commit_entity (dérivation des notifications),
les modifications et suppressions n'en déclenchent aucune.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException

from portal.schemas.common import EntityKind
from portal.services import entity_service
from portal.stores.base import EntityStore
from portal.stores.factory import get_store

# URL -> (collection, libellé utilisé dans les messages d'erreur)
COLLECTIONS = {
    "users": (EntityKind.USERS, "Utilisateur"),
    "students": (EntityKind.STUDENTS, "Élève"),
    "grades": (EntityKind.GRADES, "Note"),
    "attendance": (EntityKind.ATTENDANCE, "Suivi"),
    "observations": (EntityKind.OBSERVATIONS, "Observation"),
    "messages": (EntityKind.MESSAGES, "Message"),
    "events": (EntityKind.EVENTS, "Événement"),
    "documents": (EntityKind.DOCUMENTS, "Document"),
    "menus": (EntityKind.MENUS, "Menu"),
}


def build_router(path: str, kind: EntityKind, label: str) -> APIRouter:
    router = APIRouter(prefix=f"/api/{path}", tags=[label])
    not_found = f"{label} introuvable."

    @router.get("", summary=f"Lister : {path}")
    def list_items(store: EntityStore = Depends(get_store)) -> List[Any]:
        return entity_service.list_entities(store, kind)

    @router.post("", status_code=201, summary=f"Créer : {path}")
    def create_item(payload: Dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
        """Enregistre l'entité puis notifie les parents concernés."""
        return entity_service.commit_entity(store, kind, payload)

    @router.put("/{entity_id}", summary=f"Modifier : {path}")
    def update_item(entity_id: int, payload: Dict[str, Any] = Body(...), store: EntityStore = Depends(get_store)):
        result = entity_service.update_entity(store, kind, entity_id, payload)
        if result is None:
            raise HTTPException(status_code=404, detail=not_found)
        return result

    @router.delete("/{entity_id}", status_code=204, summary=f"Supprimer : {path}")
    def delete_item(entity_id: int, store: EntityStore = Depends(get_store)):
        if not entity_service.delete_entity(store, kind, entity_id):
            raise HTTPException(status_code=404, detail=not_found)

    return router


routers = [build_router(path, kind, label) for path, (kind, label) in COLLECTIONS.items()]
