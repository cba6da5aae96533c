"""
Magasin relationnel (SQLAlchemy) — PostgreSQL en production, SQLite en test.

Chaque opération ouvre sa propre session et la ferme après usage.
Les clés étrangères de la base sont le dernier rempart : les références et
l'unicité sont vérifiées avant le commit pour renvoyer une erreur explicite.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, List, Optional

from pydantic import BaseModel
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from portal.exceptions import ConflictError, ReferentialError, TransactionFailure, ValidationError
from portal.models.attendance import Attendance
from portal.models.document import Document
from portal.models.event import Event
from portal.models.grade import Grade
from portal.models.menu import DailyMenu
from portal.models.message import Message
from portal.models.notification import Notification
from portal.models.observation import Observation
from portal.models.student import Student
from portal.models.timetable import TimetableEntry
from portal.models.user import User
from portal.schemas.common import ABSENCE_STATUSES, EntityKind, UserRole, normalize_class_label
from portal.schemas.notification import NotificationDraft, NotificationResponse
from portal.schemas.registry import RESPONSE_SCHEMAS
from portal.stores.base import EntityStore, KeyedLock

logger = logging.getLogger(__name__)

MODELS = {
    EntityKind.USERS: User,
    EntityKind.STUDENTS: Student,
    EntityKind.GRADES: Grade,
    EntityKind.ATTENDANCE: Attendance,
    EntityKind.OBSERVATIONS: Observation,
    EntityKind.TIMETABLE: TimetableEntry,
    EntityKind.MESSAGES: Message,
    EntityKind.EVENTS: Event,
    EntityKind.DOCUMENTS: Document,
    EntityKind.MENUS: DailyMenu,
    EntityKind.NOTIFICATIONS: Notification,
}


def _plain(data: dict) -> dict:
    """Les énumérations sont stockées par leur valeur texte."""
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in data.items()}


class SqlEntityStore(EntityStore):
    backend_name = "sql"

    def __init__(self, session_factory: sessionmaker, clock: Optional[Callable[[], datetime]] = None):
        self._session_factory = session_factory
        self._key_locks = KeyedLock()
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # --- Écritures génériques ---

    def insert(self, kind: EntityKind, data: dict) -> BaseModel:
        self._check_references(kind, data)
        self._check_unique(kind, data)
        with self._session_factory() as db:
            obj = MODELS[kind](**_plain(data))
            db.add(obj)
            self._commit(db, kind)
            db.refresh(obj)
            return self._to_response(kind, obj)

    def update(self, kind: EntityKind, entity_id: int, data: dict) -> Optional[BaseModel]:
        if self.get(kind, entity_id) is None:
            return None
        self._check_references(kind, data)
        self._check_unique(kind, data, exclude_id=entity_id)
        self._check_role_change(kind, entity_id, data)
        with self._session_factory() as db:
            obj = db.get(MODELS[kind], entity_id)
            if obj is None:
                return None
            for field, value in _plain(data).items():
                if field != "id":
                    setattr(obj, field, value)
            self._commit(db, kind)
            db.refresh(obj)
            return self._to_response(kind, obj)

    def delete(self, kind: EntityKind, entity_id: int) -> bool:
        if self.get(kind, entity_id) is None:
            return False
        self._check_restricts(kind, entity_id)
        with self._session_factory() as db:
            obj = db.get(MODELS[kind], entity_id)
            if obj is None:
                return False
            db.delete(obj)
            self._commit(db, kind, deleting=True)
            return True

    def replace_by_key(
        self, kind: EntityKind, key_field: str, key_value: str, rows: List[dict]
    ) -> List[BaseModel]:
        model = MODELS[kind]
        key_column = getattr(model, key_field)
        normalized = normalize_class_label(key_value)

        with self._key_locks.hold((kind, normalized)), self._session_factory() as db:
            try:
                # Sélection en Python pour appliquer exactement la même normalisation que le magasin local
                stale = [
                    row_id for row_id, label in db.execute(select(model.id, key_column)).all()
                    if normalize_class_label(label) == normalized
                ]
                for obj in db.execute(select(model).where(model.id.in_(stale))).scalars():
                    db.delete(obj)
                fresh = [model(**_plain({**row, key_field: key_value})) for row in rows]
                db.add_all(fresh)
                db.flush()
                db.commit()
            except (SQLAlchemyError, TypeError, ValueError) as exc:
                db.rollback()
                logger.error("Remplacement %s « %s » annulé : %s", kind.value, key_value, exc)
                raise TransactionFailure(
                    f"Le remplacement pour « {key_value} » a échoué et a été annulé."
                ) from exc

            logger.debug("%s « %s » : %d supprimés, %d insérés", kind.value, key_value, len(stale), len(fresh))
            return [self._to_response(kind, obj) for obj in sorted(fresh, key=lambda o: o.id)]

    # --- Lectures ---

    def get(self, kind: EntityKind, entity_id: int) -> Optional[BaseModel]:
        with self._session_factory() as db:
            obj = db.get(MODELS[kind], entity_id)
            return self._to_response(kind, obj) if obj is not None else None

    def list(self, kind: EntityKind, **filters: Any) -> List[BaseModel]:
        model = MODELS[kind]
        with self._session_factory() as db:
            rows = db.execute(
                select(model).filter_by(**_plain(filters)).order_by(model.id)
            ).scalars().all()
            return [self._to_response(kind, obj) for obj in rows]

    def count_absences(self, student_id: int) -> int:
        with self._session_factory() as db:
            return db.execute(
                select(func.count())
                .select_from(Attendance)
                .where(
                    Attendance.student_id == student_id,
                    Attendance.status.in_([s.value for s in ABSENCE_STATUSES]),
                )
            ).scalar() or 0

    def parent_ids(self) -> List[int]:
        with self._session_factory() as db:
            return list(db.execute(
                select(User.id).where(User.role == UserRole.PARENT.value).order_by(User.id)
            ).scalars().all())

    def parent_ids_for_class(self, class_label: str) -> List[int]:
        normalized = normalize_class_label(class_label)
        with self._session_factory() as db:
            rows = db.execute(
                select(Student.parent_id, Student.class_label)
                .where(Student.is_archived.is_(False))
                .order_by(Student.id)
            ).all()
        return list(dict.fromkeys(
            parent_id for parent_id, label in rows
            if normalize_class_label(label) == normalized
        ))

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
        query = select(Notification).order_by(Notification.created_at.desc(), Notification.id.desc())
        if user_id is not None:
            query = query.where(Notification.user_id == user_id)
        with self._session_factory() as db:
            rows = db.execute(query).scalars().all()
            return [NotificationResponse.model_validate(n) for n in rows]

    def mark_notification_read(self, notification_id: int) -> bool:
        with self._session_factory() as db:
            notification = db.get(Notification, notification_id)
            if notification is None:
                return False
            notification.read = True
            db.commit()
            return True

    def mark_all_read(self, user_id: int) -> int:
        with self._session_factory() as db:
            result = db.execute(
                update(Notification)
                .where(Notification.user_id == user_id, Notification.read.is_(False))
                .values(read=True)
            )
            db.commit()
            return result.rowcount or 0

    def ping(self) -> bool:
        try:
            with self._session_factory() as db:
                db.execute(select(1))
            return True
        except SQLAlchemyError as exc:
            logger.error("Base de données injoignable : %s", exc)
            return False

    # --- Interne ---

    def _commit(self, db, kind: EntityKind, deleting: bool = False) -> None:
        try:
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            reason = str(exc.orig).lower()
            # SQLite : "NOT NULL constraint failed", PostgreSQL : "violates not-null constraint"
            if "not null" in reason or "not-null" in reason:
                raise ValidationError(f"Champ obligatoire manquant pour {kind.value}.") from exc
            if "foreign key" in reason and not deleting:
                raise ReferentialError(f"Référence invalide pour {kind.value}.") from exc
            raise ConflictError(f"Contrainte d'unicité violée pour {kind.value}.") from exc

    @staticmethod
    def _to_response(kind: EntityKind, obj) -> BaseModel:
        return RESPONSE_SCHEMAS[kind].model_validate(obj)
