"""
Tests du remplacement transactionnel de l'emploi du temps d'une classe.
"""

import threading
from unittest.mock import patch

import pytest

from portal.database import init_db, make_engine, make_session_factory
from portal.exceptions import TransactionFailure, ValidationError
from portal.schemas.timetable import TimetableEntryDraft
from portal.services.timetable_service import list_timetable, replace_timetable_for_class
from portal.stores.local_store import LocalDocumentStore
from portal.stores.sql_store import SqlEntityStore

UPDATED = "L'emploi du temps pour la classe {} a été mis à jour."


def make_draft(subject="Mathématiques", day="Lundi", time_range="08:30 - 09:30", teacher="M. Leroy"):
    return {"day": day, "time_range": time_range, "subject": subject, "teacher": teacher}


# ============================================================
# Remplacement
# ============================================================

def test_replace_retourne_creneaux_inseres(store):
    result = replace_timetable_for_class(store, "CP", [make_draft("Math"), make_draft("Éveil", day="Mardi")])
    assert [(e.day.value, e.subject, e.class_label) for e in result] == [
        ("Lundi", "Math", "CP"), ("Mardi", "Éveil", "CP"),
    ]


def test_replace_fusionne_variantes_casse(store):
    replace_timetable_for_class(store, "CP", [make_draft("Math"), make_draft("Lecture")])
    replace_timetable_for_class(store, "cp", [make_draft("Sport")])

    entries = list_timetable(store, "CP")
    assert [e.subject for e in entries] == ["Sport"]
    assert entries[0].class_label == "cp"


def test_replace_liste_vide_vide_la_classe(store):
    replace_timetable_for_class(store, "CP", [make_draft()])
    assert replace_timetable_for_class(store, "CP", []) == []
    assert list_timetable(store, "CP") == []


def test_replace_ignore_id_et_classe_du_client(store):
    draft = {**make_draft(), "id": 9999, "class_label": "CE2"}
    (entry,) = replace_timetable_for_class(store, "CP", [draft])
    assert entry.id != 9999
    assert entry.class_label == "CP"


def test_replace_accepte_brouillons_types(store):
    draft = TimetableEntryDraft(day="Jeudi", time_range="10:00 - 11:00", subject="Dessin", teacher="")
    (entry,) = replace_timetable_for_class(store, "CP", [draft])
    assert entry.subject == "Dessin"


def test_list_timetable_toutes_classes(store):
    replace_timetable_for_class(store, "CP", [make_draft("A")])
    replace_timetable_for_class(store, "CE1", [make_draft("B")])
    assert {e.subject for e in list_timetable(store)} == {"A", "B"}
    assert [e.subject for e in list_timetable(store, " ce1 ")] == ["B"]


# ============================================================
# Validation et annulation
# ============================================================

def test_classe_vide_rejetee(store):
    with pytest.raises(ValidationError):
        replace_timetable_for_class(store, "   ", [make_draft()])


def test_creneau_invalide_aucune_ecriture(store, add_user, add_student):
    parent = add_user()
    add_student(parent.id, class_label="CP")
    replace_timetable_for_class(store, "CP", [make_draft("Math")])

    with pytest.raises(ValidationError, match="Créneau n°2"):
        replace_timetable_for_class(store, "CP", [make_draft("Sport"), make_draft(subject="  ")])

    assert [e.subject for e in list_timetable(store, "CP")] == ["Math"]
    assert len(store.list_notifications(parent.id)) == 1


def test_jour_inconnu_rejete(store):
    with pytest.raises(ValidationError):
        replace_timetable_for_class(store, "CP", [make_draft(day="Samedi")])


def test_echec_ecriture_ancien_emploi_du_temps_intact(store, add_user, add_student):
    parent = add_user()
    add_student(parent.id, class_label="CP")
    replace_timetable_for_class(store, "CP", [make_draft("Math")])

    with patch.object(store, "replace_by_key", side_effect=TransactionFailure("annulé")):
        with pytest.raises(TransactionFailure):
            replace_timetable_for_class(store, "CP", [make_draft("Sport")])

    assert [e.subject for e in list_timetable(store, "CP")] == ["Math"]
    assert len(store.list_notifications(parent.id)) == 1


# ============================================================
# Notifications aux parents
# ============================================================

def test_une_notification_par_parent(store, add_user, add_student):
    p1, p2, other = add_user(), add_user(), add_user()
    add_student(p1.id, class_label="CP", first_name="Léa")
    add_student(p1.id, class_label="cp", first_name="Tom")
    add_student(p2.id, class_label="CP", first_name="Zoé")
    add_student(other.id, class_label="CE1")

    replace_timetable_for_class(store, "CP", [make_draft("A"), make_draft("B"), make_draft("C")])

    for parent in (p1, p2):
        (notification,) = store.list_notifications(parent.id)
        assert notification.message == UPDATED.format("CP")
        assert notification.link == "suivi"
    assert store.list_notifications(other.id) == []


def test_parents_notifies_meme_si_liste_vide(store, add_user, add_student):
    parent = add_user()
    add_student(parent.id, class_label="CP")
    replace_timetable_for_class(store, "CP", [])
    assert len(store.list_notifications(parent.id)) == 1


def test_eleve_archive_parent_non_notifie(store, add_user, add_student):
    parent = add_user()
    add_student(parent.id, class_label="CP", is_archived=True)
    replace_timetable_for_class(store, "CP", [make_draft()])
    assert store.list_notifications(parent.id) == []


def test_echec_notification_n_annule_pas_le_remplacement(store, add_user, add_student):
    parent = add_user()
    add_student(parent.id, class_label="CP")

    with patch.object(store, "append_notification", side_effect=RuntimeError("journal indisponible")):
        result = replace_timetable_for_class(store, "CP", [make_draft("Math")])

    assert [e.subject for e in result] == ["Math"]
    assert [e.subject for e in list_timetable(store, "CP")] == ["Math"]


# ============================================================
# Concurrence
# ============================================================

def run_concurrently(store, labels):
    errors = []
    barrier = threading.Barrier(len(labels))

    def worker(label):
        try:
            barrier.wait()
            for round_ in range(5):
                replace_timetable_for_class(store, label, [make_draft(f"{label}-{round_}-{i}") for i in range(3)])
        except Exception as exc:  # remonté au thread principal
            errors.append(exc)

    threads = [threading.Thread(target=worker, args=(label,)) for label in labels]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


def assert_one_set_per_class(store, labels):
    for label in labels:
        subjects = [e.subject for e in list_timetable(store, label)]
        assert subjects == [f"{label}-4-{i}" for i in range(3)]


@pytest.fixture(params=["sql", "local"])
def threaded_store(request, tmp_path):
    """Les threads ont besoin de connexions distinctes : SQLite sur fichier, pas en mémoire."""
    if request.param == "local":
        yield LocalDocumentStore()
        return
    engine = make_engine(
        f"sqlite:///{tmp_path / 'portal.db'}", connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(engine)
    yield SqlEntityStore(make_session_factory(engine))
    engine.dispose()


def test_concurrence_classes_differentes(threaded_store):
    labels = ["CP", "CE1", "CE2"]
    assert run_concurrently(threaded_store, labels) == []
    assert_one_set_per_class(threaded_store, labels)


def test_concurrence_meme_classe_un_seul_ensemble(threaded_store):
    store = threaded_store
    barrier = threading.Barrier(2)

    def worker(prefix):
        barrier.wait()
        replace_timetable_for_class(store, "CP", [make_draft(f"{prefix}-{i}") for i in range(3)])

    threads = [threading.Thread(target=worker, args=(p,)) for p in ("A", "B")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    subjects = [e.subject for e in list_timetable(store, "CP")]
    assert subjects in (["A-0", "A-1", "A-2"], ["B-0", "B-1", "B-2"])
