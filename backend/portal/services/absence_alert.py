"""
Règle d'alerte sur le seuil d'absences.

Après chaque nouvelle ligne de présence :
1. Notification de suivi au parent — type "error" pour une absence, "info" sinon
2. Si la nouvelle ligne est une absence, recomptage complet des absences de l'élève
   (justifiées ou non, ligne courante incluse). Si le total est EXACTEMENT égal au seuil,
   une seconde notification distincte prévient le parent que le seuil est atteint.

Choix assumé pour éviter le spam : au-delà du seuil, plus aucune alerte.
Le compteur n'est jamais stocké ; après suppressions, un nouveau franchissement réalerte.
Les élèves archivés ne déclenchent pas l'alerte de seuil.
"""

import logging
from typing import List

from portal.schemas.attendance import AttendanceResponse
from portal.schemas.common import AttendanceStatus, NotificationType
from portal.schemas.notification import NotificationDraft
from portal.services.lookup import format_date, resolve_student
from portal.stores.base import EntityStore

logger = logging.getLogger(__name__)

FOLLOW_UP_LINK = "suivi"


def evaluate_attendance(
    store: EntityStore, attendance: AttendanceResponse, threshold: int
) -> List[NotificationDraft]:
    student = resolve_student(store, attendance.student_id)
    status = AttendanceStatus(attendance.status)

    drafts = [
        NotificationDraft(
            user_id=student.parent_id,
            message=(
                f"Nouveau suivi pour {student.first_name}: {status.value} "
                f"le {format_date(attendance.date)}."
            ),
            type=NotificationType.ERROR if status.is_absence else NotificationType.INFO,
            link=FOLLOW_UP_LINK,
        )
    ]

    if not status.is_absence or student.is_archived:
        return drafts

    count = store.count_absences(student.id)
    if count == threshold:
        logger.info(
            "Seuil d'absences atteint — élève %s : %d absences", student.id, count,
        )
        drafts.append(
            NotificationDraft(
                user_id=student.parent_id,
                message=(
                    f"Attention : L'élève {student.first_name} {student.last_name} "
                    f"a atteint {threshold} absences."
                ),
                type=NotificationType.ERROR,
                link=FOLLOW_UP_LINK,
            )
        )
    return drafts
