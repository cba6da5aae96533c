"""
Contrat commun des magasins d'entités (stratégie à deux implémentations).

Les deux backends — relationnel (SQLAlchemy) et document local — exposent les
mêmes opérations et doivent produire des résultats observables identiques :
- identifiants entiers uniques et croissants dans l'ordre d'émission
- références (student_id, parent_id, …) vérifiées à l'écriture
- unicité de l'email (insensible à la casse) et de la date d'un menu
- remplacement en bloc par clé atomique, sérialisé par clé normalisée
"""

import threading
import weakref
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional

from pydantic import BaseModel

from portal.exceptions import ConflictError, ReferentialError
from portal.schemas.common import EntityKind
from portal.schemas.notification import NotificationDraft, NotificationResponse
from portal.schemas.registry import REFERENCES, RESTRICTS

# Champs uniques : (champ, comparaison insensible à la casse)
UNIQUE_FIELDS = {
    EntityKind.USERS: ("email", True),
    EntityKind.MENUS: ("date", False),
}


class KeyedLock:
    """
    Un verrou par clé : deux clés différentes ne se bloquent jamais.
    Un verrou n'existe que tant qu'un appelant le détient ou l'attend.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: weakref.WeakValueDictionary = weakref.WeakValueDictionary()

    @contextmanager
    def hold(self, key) -> Iterator[None]:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
        with lock:
            yield

    def __len__(self) -> int:
        return len(self._locks)


class EntityStore(ABC):
    """Interface de persistance partagée par les services."""

    backend_name = "abstract"

    # --- Écritures génériques ---

    @abstractmethod
    def insert(self, kind: EntityKind, data: dict) -> BaseModel:
        """Insère une entité et retourne l'enregistrement avec son nouvel id."""

    @abstractmethod
    def update(self, kind: EntityKind, entity_id: int, data: dict) -> Optional[BaseModel]:
        """Met à jour les champs fournis. Retourne None si l'entité est introuvable."""

    @abstractmethod
    def delete(self, kind: EntityKind, entity_id: int) -> bool:
        """Supprime une entité (cascade sur ses dépendances). False si introuvable."""

    @abstractmethod
    def replace_by_key(
        self, kind: EntityKind, key_field: str, key_value: str, rows: List[dict]
    ) -> List[BaseModel]:
        """
        Remplace atomiquement toutes les lignes dont `key_field` correspond à `key_value`
        (comparaison trim + minuscules) par `rows`, étiquetées avec `key_value` tel quel.
        Lève TransactionFailure en cas d'échec : aucun effet partiel.
        """

    # --- Lectures ---

    @abstractmethod
    def get(self, kind: EntityKind, entity_id: int) -> Optional[BaseModel]:
        """Retourne une entité par son id, ou None."""

    @abstractmethod
    def list(self, kind: EntityKind, **filters: Any) -> List[BaseModel]:
        """Retourne les entités (filtres d'égalité optionnels), triées par id."""

    @abstractmethod
    def count_absences(self, student_id: int) -> int:
        """Nombre de lignes de présence de type absence (justifiée ou non) de l'élève."""

    @abstractmethod
    def parent_ids(self) -> List[int]:
        """Identifiants de tous les utilisateurs de rôle parent."""

    @abstractmethod
    def parent_ids_for_class(self, class_label: str) -> List[int]:
        """Parents distincts des élèves actifs (non archivés) de la classe."""

    # --- Journal des notifications ---

    @abstractmethod
    def append_notification(self, draft: NotificationDraft) -> NotificationResponse:
        """Ajoute une notification non lue, horodatée maintenant."""

    @abstractmethod
    def list_notifications(self, user_id: Optional[int] = None) -> List[NotificationResponse]:
        """Notifications de la plus récente à la plus ancienne."""

    @abstractmethod
    def mark_notification_read(self, notification_id: int) -> bool:
        """Marque une notification comme lue. False si introuvable."""

    @abstractmethod
    def mark_all_read(self, user_id: int) -> int:
        """Marque comme lues toutes les notifications de l'utilisateur. Retourne le nombre modifié."""

    def ping(self) -> bool:
        """Vérifie que le backend répond."""
        return True

    # --- Contraintes partagées ---

    def _check_references(self, kind: EntityKind, data: dict) -> None:
        for field, (target_kind, required_role) in REFERENCES.get(kind, {}).items():
            if field not in data:
                continue
            value = data[field]
            target = self.get(target_kind, value) if value is not None else None
            if target is None:
                raise ReferentialError(f"Référence invalide : {field}={value} introuvable.")
            if required_role is not None and target.role != required_role:
                raise ReferentialError(
                    f"Référence invalide : l'utilisateur {value} n'a pas le rôle « {required_role} »."
                )

    def _check_unique(self, kind: EntityKind, data: dict, exclude_id: Optional[int] = None) -> None:
        if kind not in UNIQUE_FIELDS:
            return
        field, casefold = UNIQUE_FIELDS[kind]
        if field not in data:
            return
        value = data[field]
        for existing in self.list(kind):
            if existing.id == exclude_id:
                continue
            current = getattr(existing, field)
            if casefold:
                duplicate = str(current).lower() == str(value).lower()
            else:
                duplicate = current == value
            if duplicate:
                raise ConflictError(f"Doublon : {field} « {value} » existe déjà.")

    def _check_restricts(self, kind: EntityKind, entity_id: int) -> None:
        for dependent_kind, field in RESTRICTS.get(kind, []):
            if self.list(dependent_kind, **{field: entity_id}):
                raise ConflictError(
                    "Suppression impossible : des élèves sont encore rattachés à ce parent. "
                    "Réassignez-les d'abord à un autre parent."
                )

    def _check_role_change(self, kind: EntityKind, entity_id: int, data: dict) -> None:
        """Un utilisateur encore référencé avec un rôle exigé ne peut pas en changer."""
        if "role" not in data:
            return
        for dependent_kind, fields in REFERENCES.items():
            for field, (target_kind, required_role) in fields.items():
                if target_kind != kind or required_role is None or data["role"] == required_role:
                    continue
                if self.list(dependent_kind, **{field: entity_id}):
                    raise ConflictError(
                        f"Changement de rôle impossible : l'utilisateur {entity_id} est encore "
                        f"référencé comme « {required_role} ». Réassignez d'abord ses élèves."
                    )
