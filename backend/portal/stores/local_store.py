"""
Magasin de documents local, mono-processus (équivalent serveur du mode démo hors-ligne).

Toutes les collections vivent en mémoire dans un conteneur possédé par l'instance,
protégé par un verrou réentrant : un seul écrivain à la fois. Un instantané JSON
optionnel est réécrit après chaque mutation et rechargé à la construction.

Le remplacement en bloc construit d'abord le nouvel état complet de la collection,
puis le substitue à l'ancien : en cas d'échec, l'état précédent est restauré.
"""

import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable, List, Optional

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from portal.exceptions import TransactionFailure, ValidationError
from portal.schemas.common import ABSENCE_STATUSES, EntityKind, UserRole, normalize_class_label
from portal.schemas.notification import NotificationDraft, NotificationResponse
from portal.schemas.registry import CASCADES, RESPONSE_SCHEMAS
from portal.stores.base import EntityStore, KeyedLock

logger = logging.getLogger(__name__)


class LocalDocumentStore(EntityStore):
    backend_name = "local"

    def __init__(self, path: Optional[str] = None, clock: Optional[Callable[[], datetime]] = None):
        self._lock = threading.RLock()
        self._key_locks = KeyedLock()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._path = Path(path) if path else None
        self._tables: dict = {kind: {} for kind in EntityKind}
        self._next_id = 1
        if self._path is not None and self._path.exists():
            self._load()

    # --- Écritures génériques ---

    def insert(self, kind: EntityKind, data: dict) -> BaseModel:
        with self._lock:
            self._check_references(kind, data)
            self._check_unique(kind, data)
            record = self._build(kind, data, self._issue_id())
            self._tables[kind][record.id] = record
            self._save()
            return record.model_copy(deep=True)

    def update(self, kind: EntityKind, entity_id: int, data: dict) -> Optional[BaseModel]:
        with self._lock:
            current = self._tables[kind].get(entity_id)
            if current is None:
                return None
            self._check_references(kind, data)
            self._check_unique(kind, data, exclude_id=entity_id)
            self._check_role_change(kind, entity_id, data)
            record = self._build(kind, {**current.model_dump(), **data}, entity_id)
            self._tables[kind][entity_id] = record
            self._save()
            return record.model_copy(deep=True)

    def delete(self, kind: EntityKind, entity_id: int) -> bool:
        with self._lock:
            if entity_id not in self._tables[kind]:
                return False
            self._check_restricts(kind, entity_id)
            for dependent_kind, field in CASCADES.get(kind, []):
                table = self._tables[dependent_kind]
                for dependent_id in [r.id for r in table.values() if getattr(r, field) == entity_id]:
                    del table[dependent_id]
            del self._tables[kind][entity_id]
            self._save()
            return True

    def replace_by_key(
        self, kind: EntityKind, key_field: str, key_value: str, rows: List[dict]
    ) -> List[BaseModel]:
        normalized = normalize_class_label(key_value)
        with self._key_locks.hold((kind, normalized)), self._lock:
            table = self._tables[kind]
            snapshot = dict(table)
            next_id = self._next_id
            try:
                fresh = [self._build(kind, {**row, key_field: key_value}, self._issue_id()) for row in rows]
                for stale_id in [
                    r.id for r in table.values()
                    if normalize_class_label(getattr(r, key_field)) == normalized
                ]:
                    del table[stale_id]
                for record in fresh:
                    table[record.id] = record
                self._save()
            except Exception as exc:
                self._tables[kind] = snapshot
                self._next_id = next_id
                logger.error("Remplacement %s « %s » annulé : %s", kind.value, key_value, exc)
                raise TransactionFailure(
                    f"Le remplacement pour « {key_value} » a échoué et a été annulé."
                ) from exc
            return [record.model_copy(deep=True) for record in fresh]

    # --- Lectures ---

    def get(self, kind: EntityKind, entity_id: int) -> Optional[BaseModel]:
        with self._lock:
            record = self._tables[kind].get(entity_id)
            return record.model_copy(deep=True) if record is not None else None

    def list(self, kind: EntityKind, **filters: Any) -> List[BaseModel]:
        with self._lock:
            return [
                record.model_copy(deep=True)
                for _, record in sorted(self._tables[kind].items())
                if all(getattr(record, field) == value for field, value in filters.items())
            ]

    def count_absences(self, student_id: int) -> int:
        with self._lock:
            return sum(
                1 for r in self._tables[EntityKind.ATTENDANCE].values()
                if r.student_id == student_id and r.status in ABSENCE_STATUSES
            )

    def parent_ids(self) -> List[int]:
        with self._lock:
            return sorted(u.id for u in self._tables[EntityKind.USERS].values() if u.role == UserRole.PARENT)

    def parent_ids_for_class(self, class_label: str) -> List[int]:
        normalized = normalize_class_label(class_label)
        with self._lock:
            students = sorted(self._tables[EntityKind.STUDENTS].items())
            parent_ids = [
                s.parent_id for _, s in students
                if not s.is_archived and normalize_class_label(s.class_label) == normalized
            ]
        return list(dict.fromkeys(parent_ids))

    # --- Journal des notifications ---

    def append_notification(self, draft: NotificationDraft) -> NotificationResponse:
        data = {
            "user_id": draft.user_id,
            "message": draft.message,
            "type": draft.type,
            "link": draft.link,
            "read": False,
            "created_at": self._clock(),
        }
        return self.insert(EntityKind.NOTIFICATIONS, data)

    def list_notifications(self, user_id: Optional[int] = None) -> List[NotificationResponse]:
        filters = {"user_id": user_id} if user_id is not None else {}
        notifications = self.list(EntityKind.NOTIFICATIONS, **filters)
        return sorted(notifications, key=lambda n: (n.created_at, n.id), reverse=True)

    def mark_notification_read(self, notification_id: int) -> bool:
        with self._lock:
            record = self._tables[EntityKind.NOTIFICATIONS].get(notification_id)
            if record is None:
                return False
            if not record.read:
                self._tables[EntityKind.NOTIFICATIONS][notification_id] = record.model_copy(update={"read": True})
                self._save()
            return True

    def mark_all_read(self, user_id: int) -> int:
        with self._lock:
            table = self._tables[EntityKind.NOTIFICATIONS]
            unread = [n for n in table.values() if n.user_id == user_id and not n.read]
            for notification in unread:
                table[notification.id] = notification.model_copy(update={"read": True})
            if unread:
                self._save()
            return len(unread)

    # --- Interne ---

    def _issue_id(self) -> int:
        issued = self._next_id
        self._next_id += 1
        return issued

    def _build(self, kind: EntityKind, data: dict, entity_id: int) -> BaseModel:
        try:
            return RESPONSE_SCHEMAS[kind].model_validate({**data, "id": entity_id})
        except PydanticValidationError as exc:
            raise ValidationError(f"Données invalides pour {kind.value}.", exc.errors(include_url=False, include_context=False, include_input=False)) from exc

    def _save(self) -> None:
        if self._path is None:
            return
        snapshot = {
            "next_id": self._next_id,
            "tables": {
                kind.value: [r.model_dump(mode="json") for _, r in sorted(table.items())]
                for kind, table in self._tables.items()
            },
        }
        tmp_path = self._path.with_suffix(self._path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(snapshot, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp_path, self._path)

    def _load(self) -> None:
        snapshot = json.loads(self._path.read_text(encoding="utf-8"))
        for kind_value, rows in snapshot.get("tables", {}).items():
            kind = EntityKind(kind_value)
            schema = RESPONSE_SCHEMAS[kind]
            self._tables[kind] = {row["id"]: schema.model_validate(row) for row in rows}
        issued = [i for table in self._tables.values() for i in table]
        self._next_id = max([snapshot.get("next_id", 1), *(i + 1 for i in issued)])
        logger.info("Magasin local chargé depuis %s (%d enregistrements).", self._path, len(issued))
