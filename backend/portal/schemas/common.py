"""
Énumérations partagées par les schémas, les modèles et les magasins.
"""

from datetime import datetime, timezone
from enum import Enum


class EntityKind(str, Enum):
    """Collections persistées, nommées comme leurs tables."""
    USERS = "users"
    STUDENTS = "students"
    GRADES = "grades"
    ATTENDANCE = "attendance"
    OBSERVATIONS = "observations"
    TIMETABLE = "timetable_entries"
    MESSAGES = "messages"
    EVENTS = "events"
    DOCUMENTS = "documents"
    MENUS = "daily_menus"
    NOTIFICATIONS = "notifications"


class UserRole(str, Enum):
    ADMIN = "admin"
    PARENT = "parent"
    TEACHER = "teacher"


class AttendanceStatus(str, Enum):
    PRESENT = "Présent"
    ABSENT_UNJUSTIFIED = "Absent (Non justifié)"
    ABSENT_JUSTIFIED = "Absent (Justifié)"
    LATE = "En retard"

    @property
    def is_absence(self) -> bool:
        return self in ABSENCE_STATUSES


ABSENCE_STATUSES = frozenset({AttendanceStatus.ABSENT_UNJUSTIFIED, AttendanceStatus.ABSENT_JUSTIFIED})


class Weekday(str, Enum):
    MONDAY = "Lundi"
    TUESDAY = "Mardi"
    WEDNESDAY = "Mercredi"
    THURSDAY = "Jeudi"
    FRIDAY = "Vendredi"


class NotificationType(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


def normalize_class_label(label: str) -> str:
    """Clé de comparaison d'une classe : « CP  » et « cp » désignent la même classe."""
    return label.strip().lower()


def not_blank(value: str, message: str) -> str:
    if not value.strip():
        raise ValueError(message)
    return value.strip()


def as_utc(value: datetime) -> datetime:
    """SQLite perd le fuseau horaire : les dates naïves relues sont considérées UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
