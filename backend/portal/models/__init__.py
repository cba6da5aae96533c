# Importe tous les modèles pour enregistrer leurs tables dans Base.metadata
# avant que SQLAlchemy tente de résoudre les clés étrangères inter-modèles.

from portal.models.user import User  # noqa: F401  (doit précéder students)
from portal.models.student import Student  # noqa: F401
from portal.models.grade import Grade  # noqa: F401
from portal.models.attendance import Attendance  # noqa: F401
from portal.models.observation import Observation  # noqa: F401
from portal.models.timetable import TimetableEntry  # noqa: F401
from portal.models.message import Message  # noqa: F401
from portal.models.event import Event  # noqa: F401
from portal.models.document import Document  # noqa: F401
from portal.models.menu import DailyMenu  # noqa: F401
from portal.models.notification import Notification  # noqa: F401
