from secret_santa.db.models import Base, Event, NotificationStatus, Participant
from secret_santa.db.session import SessionLocal, get_session, init_engine

__all__ = [
    "Base",
    "Event",
    "NotificationStatus",
    "Participant",
    "SessionLocal",
    "get_session",
    "init_engine",
]
