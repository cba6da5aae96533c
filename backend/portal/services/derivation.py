"""
Dérivation des notifications à partir d'une entité fraîchement enregistrée.

Appelée APRÈS le commit de l'entité, sur l'état post-commit. Ne modifie rien :
retourne la liste ordonnée des notifications à ajouter au journal.

| Entité      | Destinataires            | Lien          |
|-------------|--------------------------|---------------|
| Note        | parent de l'élève        | suivi         |
| Présence    | voir absence_alert       | suivi         |
| Observation | parent de l'élève        | observations  |
| Document    | tous les parents         | documents     |
| Événement   | tous les parents         | evenements    |
| Message     | destinataire uniquement  | messages      |

Lève DerivationFailure si l'élève ou l'expéditeur référencé est introuvable.
"""

from typing import List

from pydantic import BaseModel

from portal.schemas.common import EntityKind, NotificationType
from portal.schemas.notification import NotificationDraft
from portal.services import absence_alert
from portal.services.lookup import format_date, format_score, resolve_student, resolve_user
from portal.stores.base import EntityStore


def derive_notifications(
    store: EntityStore, kind: EntityKind, entity: BaseModel, absence_threshold: int
) -> List[NotificationDraft]:
    if kind == EntityKind.ATTENDANCE:
        return absence_alert.evaluate_attendance(store, entity, absence_threshold)
    deriver = DERIVERS.get(kind)
    if deriver is None:
        return []
    return deriver(store, entity)


def _grade(store: EntityStore, grade) -> List[NotificationDraft]:
    student = resolve_student(store, grade.student_id)
    return [NotificationDraft(
        user_id=student.parent_id,
        message=f"Nouvelle note en {grade.subject} pour {student.first_name}: {format_score(grade.score)}/20.",
        type=NotificationType.INFO,
        link="suivi",
    )]


def _observation(store: EntityStore, observation) -> List[NotificationDraft]:
    student = resolve_student(store, observation.student_id)
    return [NotificationDraft(
        user_id=student.parent_id,
        message=f"Nouvelle observation pour {student.first_name}.",
        type=NotificationType.INFO,
        link="observations",
    )]


def _message(store: EntityStore, message) -> List[NotificationDraft]:
    sender = resolve_user(store, message.sender_id)
    return [NotificationDraft(
        user_id=message.receiver_id,
        message=f"Nouveau message de {sender.name}.",
        type=NotificationType.INFO,
        link="messages",
    )]


def _document(store: EntityStore, document) -> List[NotificationDraft]:
    return _broadcast(store, f"Nouveau document disponible : \"{document.title}\".", "documents")


def _event(store: EntityStore, event) -> List[NotificationDraft]:
    return _broadcast(
        store,
        f"Nouvel événement : \"{event.title}\" le {format_date(event.event_date)}.",
        "evenements",
    )


def _broadcast(store: EntityStore, message: str, link: str) -> List[NotificationDraft]:
    """Une notification par parent."""
    return [
        NotificationDraft(user_id=parent_id, message=message, type=NotificationType.INFO, link=link)
        for parent_id in store.parent_ids()
    ]


DERIVERS = {
    EntityKind.GRADES: _grade,
    EntityKind.OBSERVATIONS: _observation,
    EntityKind.MESSAGES: _message,
    EntityKind.DOCUMENTS: _document,
    EntityKind.EVENTS: _event,
}
