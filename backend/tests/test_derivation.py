"""
Tests unitaires pour la dérivation des notifications (une règle par type d'entité).
"""

import datetime as dt
from unittest.mock import MagicMock

import pytest

from portal.exceptions import DerivationFailure
from portal.schemas.common import EntityKind, NotificationType
from portal.services.derivation import derive_notifications


# --- Helpers ---

def insert_grade(store, student_id, score=15.5, subject="Mathématiques"):
    return store.insert(EntityKind.GRADES, {
        "student_id": student_id, "subject": subject, "score": score, "coefficient": 1,
        "period": "T1", "date": dt.date(2025, 10, 1),
    })


# ============================================================
# Entités rattachées à un élève
# ============================================================

def test_note_notifie_le_parent(store, add_user, add_student):
    parent = add_user()
    student = add_student(parent.id, first_name="Léa")
    grade = insert_grade(store, student.id)

    (draft,) = derive_notifications(store, EntityKind.GRADES, grade, absence_threshold=3)

    assert draft.user_id == parent.id
    assert draft.message == "Nouvelle note en Mathématiques pour Léa: 15.5/20."
    assert draft.type == NotificationType.INFO
    assert draft.link == "suivi"


def test_note_entiere_sans_decimales(store, add_user, add_student):
    student = add_student(add_user().id, first_name="Tom")
    grade = insert_grade(store, student.id, score=18.0, subject="Éveil")

    (draft,) = derive_notifications(store, EntityKind.GRADES, grade, absence_threshold=3)
    assert draft.message == "Nouvelle note en Éveil pour Tom: 18/20."


def test_observation_notifie_le_parent(store, add_user, add_student):
    parent = add_user()
    student = add_student(parent.id, first_name="Léa")
    observation = store.insert(EntityKind.OBSERVATIONS, {
        "student_id": student.id, "date": dt.date(2025, 10, 2), "content": "Très bon travail",
        "author": "Mme Leroy",
    })

    (draft,) = derive_notifications(store, EntityKind.OBSERVATIONS, observation, absence_threshold=3)
    assert draft.user_id == parent.id
    assert draft.message == "Nouvelle observation pour Léa."
    assert draft.link == "observations"


def test_eleve_disparu_leve_derivation_failure():
    store = MagicMock()
    store.get.return_value = None
    grade = MagicMock(student_id=12)

    with pytest.raises(DerivationFailure):
        derive_notifications(store, EntityKind.GRADES, grade, absence_threshold=3)


# ============================================================
# Messages
# ============================================================

def test_message_notifie_uniquement_le_destinataire(store, add_user):
    admin = add_user(role="admin", name="Direction")
    parent = add_user()
    add_user()
    message = store.insert(EntityKind.MESSAGES, {
        "sender_id": admin.id, "receiver_id": parent.id, "content": "Réunion jeudi",
        "sent_at": dt.datetime(2025, 10, 1, 9, 0, tzinfo=dt.timezone.utc),
    })

    (draft,) = derive_notifications(store, EntityKind.MESSAGES, message, absence_threshold=3)
    assert draft.user_id == parent.id
    assert draft.message == "Nouveau message de Direction."
    assert draft.link == "messages"


# ============================================================
# Diffusions à tous les parents
# ============================================================

def test_document_diffuse_a_tous_les_parents(store, add_user):
    add_user(role="admin")
    p1, p2 = add_user(), add_user()
    add_user(role="teacher")
    document = store.insert(EntityKind.DOCUMENTS, {
        "title": "Règlement", "description": "", "url": "https://ecole.be/reglement.pdf",
    })

    drafts = derive_notifications(store, EntityKind.DOCUMENTS, document, absence_threshold=3)
    assert [d.user_id for d in drafts] == [p1.id, p2.id]
    assert drafts[0].message == 'Nouveau document disponible : "Règlement".'
    assert drafts[0].link == "documents"


def test_evenement_date_format_francais(store, add_user):
    parent = add_user()
    event = store.insert(EntityKind.EVENTS, {
        "title": "Fête de l'école", "description": "", "event_date": dt.date(2026, 6, 20),
    })

    (draft,) = derive_notifications(store, EntityKind.EVENTS, event, absence_threshold=3)
    assert draft.user_id == parent.id
    assert draft.message == 'Nouvel événement : "Fête de l\'école" le 20/06/2026.'
    assert draft.link == "evenements"


def test_diffusion_sans_parent(store, add_user):
    add_user(role="admin")
    event = store.insert(EntityKind.EVENTS, {"title": "Portes ouvertes", "description": "", "event_date": dt.date(2026, 3, 1)})
    assert derive_notifications(store, EntityKind.EVENTS, event, absence_threshold=3) == []


def test_menu_sans_notification(store):
    menu = store.insert(EntityKind.MENUS, {
        "date": dt.date(2025, 10, 6), "starter": "", "main_course": "Lasagnes", "dessert": "", "snack": "",
    })
    assert derive_notifications(store, EntityKind.MENUS, menu, absence_threshold=3) == []
