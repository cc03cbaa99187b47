from __future__ import annotations

import datetime
from typing import Dict, Iterable, List, Optional

from sqlalchemy import select, update

from secret_santa.db.models import Event, NotificationStatus, Participant


def create_event(
    session,
    name: str,
    admin_token: str,
    budget: Optional[str] = None,
    event_date: Optional[str] = None,
    rules: Optional[str] = None,
) -> Event:
    event = Event(
        name=name,
        admin_token=admin_token,
        budget=budget,
        event_date=event_date,
        rules=rules,
        is_locked=False,
    )
    session.add(event)
    session.flush()
    return event


def get_event_by_admin_token(session, admin_token: str) -> Optional[Event]:
    return session.scalar(select(Event).where(Event.admin_token == admin_token))


def get_event_by_id(session, event_id: str) -> Optional[Event]:
    return session.scalar(select(Event).where(Event.id == event_id))


def update_event_locked(session, event: Event, is_locked: bool) -> None:
    event.is_locked = is_locked


def add_participant(
    session,
    event_id: str,
    name: str,
    email: Optional[str],
    access_token: str,
) -> Participant:
    participant = Participant(
        event_id=event_id,
        name=name,
        email=email,
        access_token=access_token,
    )
    session.add(participant)
    session.flush()
    return participant


def get_participant_by_id(session, participant_id: str) -> Optional[Participant]:
    return session.scalar(select(Participant).where(Participant.id == participant_id))


def get_participant_by_access_token(session, access_token: str) -> Optional[Participant]:
    return session.scalar(select(Participant).where(Participant.access_token == access_token))


def list_event_participants(session, event_id: str) -> List[Participant]:
    return list(
        session.scalars(
            select(Participant)
            .where(Participant.event_id == event_id)
            .order_by(Participant.created_at, Participant.id)
        ).all()
    )


def clear_assignments(session, participant_ids: Iterable[str], reset_viewed: bool = False) -> None:
    values = {
        "assigned_to_id": None,
        "notification_status": NotificationStatus.NOT_SENT,
        "notified_at": None,
    }
    if reset_viewed:
        values["viewed_at"] = None
    session.execute(
        update(Participant)
        .where(Participant.id.in_(list(participant_ids)))
        .values(**values)
        .execution_options(synchronize_session="fetch")
    )
    session.flush()


def set_assignments(session, assignments: Dict[str, str]) -> None:
    # Receivers are unique per event; callers clear the givers first.
    for giver_id, receiver_id in assignments.items():
        session.execute(
            update(Participant)
            .where(Participant.id == giver_id)
            .values(assigned_to_id=receiver_id)
            .execution_options(synchronize_session="fetch")
        )
    session.flush()


def mark_participant_viewed(session, participant: Participant) -> None:
    participant.viewed_at = datetime.datetime.utcnow()
    participant.notification_status = NotificationStatus.VIEWED


def mark_participant_notified(session, participant: Participant) -> None:
    participant.notification_status = NotificationStatus.SENT
    participant.notified_at = datetime.datetime.utcnow()
