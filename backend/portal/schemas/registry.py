"""
Correspondance entre chaque collection et ses schémas d'entrée / de sortie.
Partagée par les deux magasins et par le service d'entités.
"""

from portal.schemas.attendance import AttendanceCreate, AttendanceResponse
from portal.schemas.common import EntityKind
from portal.schemas.document import DocumentCreate, DocumentResponse
from portal.schemas.event import EventCreate, EventResponse
from portal.schemas.grade import GradeCreate, GradeResponse
from portal.schemas.menu import MenuCreate, MenuResponse
from portal.schemas.message import MessageCreate, MessageResponse
from portal.schemas.notification import NotificationResponse
from portal.schemas.observation import ObservationCreate, ObservationResponse
from portal.schemas.student import StudentCreate, StudentResponse
from portal.schemas.timetable import TimetableEntryDraft, TimetableEntryResponse
from portal.schemas.user import UserCreate, UserResponse

CREATE_SCHEMAS = {
    EntityKind.USERS: UserCreate,
    EntityKind.STUDENTS: StudentCreate,
    EntityKind.GRADES: GradeCreate,
    EntityKind.ATTENDANCE: AttendanceCreate,
    EntityKind.OBSERVATIONS: ObservationCreate,
    EntityKind.TIMETABLE: TimetableEntryDraft,
    EntityKind.MESSAGES: MessageCreate,
    EntityKind.EVENTS: EventCreate,
    EntityKind.DOCUMENTS: DocumentCreate,
    EntityKind.MENUS: MenuCreate,
}

RESPONSE_SCHEMAS = {
    EntityKind.USERS: UserResponse,
    EntityKind.STUDENTS: StudentResponse,
    EntityKind.GRADES: GradeResponse,
    EntityKind.ATTENDANCE: AttendanceResponse,
    EntityKind.OBSERVATIONS: ObservationResponse,
    EntityKind.TIMETABLE: TimetableEntryResponse,
    EntityKind.MESSAGES: MessageResponse,
    EntityKind.EVENTS: EventResponse,
    EntityKind.DOCUMENTS: DocumentResponse,
    EntityKind.MENUS: MenuResponse,
    EntityKind.NOTIFICATIONS: NotificationResponse,
}

# Références vérifiées à l'écriture : champ -> (collection cible, rôle exigé)
REFERENCES = {
    EntityKind.STUDENTS: {"parent_id": (EntityKind.USERS, "parent")},
    EntityKind.GRADES: {"student_id": (EntityKind.STUDENTS, None)},
    EntityKind.ATTENDANCE: {"student_id": (EntityKind.STUDENTS, None)},
    EntityKind.OBSERVATIONS: {"student_id": (EntityKind.STUDENTS, None)},
    EntityKind.MESSAGES: {
        "sender_id": (EntityKind.USERS, None),
        "receiver_id": (EntityKind.USERS, None),
    },
    EntityKind.NOTIFICATIONS: {"user_id": (EntityKind.USERS, None)},
}

# Suppressions : collections dépendantes supprimées en cascade, ou bloquantes
CASCADES = {
    EntityKind.STUDENTS: [
        (EntityKind.GRADES, "student_id"),
        (EntityKind.ATTENDANCE, "student_id"),
        (EntityKind.OBSERVATIONS, "student_id"),
    ],
    EntityKind.USERS: [
        (EntityKind.MESSAGES, "sender_id"),
        (EntityKind.MESSAGES, "receiver_id"),
        (EntityKind.NOTIFICATIONS, "user_id"),
    ],
}

RESTRICTS = {
    EntityKind.USERS: [(EntityKind.STUDENTS, "parent_id")],
}
