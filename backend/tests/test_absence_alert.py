"""
Tests de la règle d'alerte sur le seuil d'absences.
"""

import datetime as dt

import pytest

from portal.schemas.attendance import AttendanceResponse
from portal.schemas.common import AttendanceStatus, EntityKind, NotificationType
from portal.services.absence_alert import evaluate_attendance
from portal.services.entity_service import commit_entity

ALERT = "a atteint 3 absences"


def record(store, student_id, day, status=AttendanceStatus.ABSENT_UNJUSTIFIED):
    return commit_entity(store, EntityKind.ATTENDANCE, {
        "student_id": student_id, "date": dt.date(2025, 10, day), "status": status,
    }, absence_threshold=3)


def alerts_for(store, parent_id):
    return [n for n in store.list_notifications(parent_id) if ALERT in n.message]


@pytest.fixture
def family(store, add_user, add_student):
    parent = add_user()
    student = add_student(parent.id, first_name="Léa", last_name="Martin")
    return parent, student


# ============================================================
# Notification de suivi
# ============================================================

def test_absence_notifie_en_erreur(store, family):
    parent, student = family
    record(store, student.id, 6)

    (notification,) = store.list_notifications(parent.id)
    assert notification.message == "Nouveau suivi pour Léa: Absent (Non justifié) le 06/10/2025."
    assert notification.type == NotificationType.ERROR
    assert notification.link == "suivi"


def test_retard_notifie_en_info(store, family):
    parent, student = family
    record(store, student.id, 6, AttendanceStatus.LATE)

    (notification,) = store.list_notifications(parent.id)
    assert notification.type == NotificationType.INFO
    assert "En retard" in notification.message


# ============================================================
# Seuil
# ============================================================

def test_alerte_exactement_au_seuil(store, family):
    parent, student = family
    record(store, student.id, 1)
    record(store, student.id, 2)
    assert alerts_for(store, parent.id) == []

    record(store, student.id, 3)
    (alert,) = alerts_for(store, parent.id)
    assert alert.message == "Attention : L'élève Léa Martin a atteint 3 absences."
    assert alert.type == NotificationType.ERROR


def test_pas_de_nouvelle_alerte_au_dela_du_seuil(store, family):
    parent, student = family
    for day in range(1, 6):
        record(store, student.id, day)
    assert len(alerts_for(store, parent.id)) == 1
    assert len(store.list_notifications(parent.id)) == 6


def test_absences_justifiees_comptees(store, family):
    parent, student = family
    record(store, student.id, 1, AttendanceStatus.ABSENT_JUSTIFIED)
    record(store, student.id, 2, AttendanceStatus.ABSENT_UNJUSTIFIED)
    record(store, student.id, 3, AttendanceStatus.ABSENT_JUSTIFIED)
    assert len(alerts_for(store, parent.id)) == 1


def test_presence_ne_declenche_pas_alerte(store, family):
    parent, student = family
    record(store, student.id, 1)
    record(store, student.id, 2)
    record(store, student.id, 3, AttendanceStatus.PRESENT)
    record(store, student.id, 4, AttendanceStatus.LATE)
    assert alerts_for(store, parent.id) == []


def test_realerte_apres_suppression(store, family):
    parent, student = family
    first = record(store, student.id, 1)
    record(store, student.id, 2)
    record(store, student.id, 3)
    store.delete(EntityKind.ATTENDANCE, first.id)

    record(store, student.id, 4)
    assert len(alerts_for(store, parent.id)) == 2


def test_eleve_archive_pas_d_alerte(store, add_user, add_student):
    parent = add_user()
    student = add_student(parent.id, is_archived=True)
    for day in range(1, 4):
        record(store, student.id, day)

    assert alerts_for(store, parent.id) == []
    assert len(store.list_notifications(parent.id)) == 3


def test_seuil_configurable(store, family):
    parent, student = family
    commit_entity(store, EntityKind.ATTENDANCE, {
        "student_id": student.id, "date": dt.date(2025, 10, 1), "status": AttendanceStatus.ABSENT_UNJUSTIFIED,
    }, absence_threshold=1)
    assert any("a atteint 1 absences" in n.message for n in store.list_notifications(parent.id))


# ============================================================
# evaluate_attendance (fonction pure)
# ============================================================

def test_evaluate_attendance_ne_modifie_rien(store, family):
    parent, student = family
    attendance = store.insert(EntityKind.ATTENDANCE, {
        "student_id": student.id, "date": dt.date(2025, 10, 1), "status": AttendanceStatus.ABSENT_UNJUSTIFIED,
    })

    drafts = evaluate_attendance(store, AttendanceResponse.model_validate(attendance), threshold=1)

    assert [d.user_id for d in drafts] == [parent.id, parent.id]
    assert store.list_notifications() == []
