from __future__ import annotations

import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, ForeignKey, String
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


def _new_id() -> str:
    return uuid.uuid4().hex


class NotificationStatus(str, enum.Enum):
    NOT_SENT = "NOT_SENT"
    SENT = "SENT"
    VIEWED = "VIEWED"


class Event(Base):
    __tablename__ = "events"

    id = Column(String(32), primary_key=True, default=_new_id)
    name = Column(String, nullable=False)
    admin_token = Column(String, unique=True, nullable=False, index=True)
    budget = Column(String, nullable=True)
    event_date = Column(String(10), nullable=True)
    rules = Column(String, nullable=True)
    is_locked = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )

    participants = relationship(
        "Participant",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Participant.created_at",
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.name}, is_locked={self.is_locked})>"


class Participant(Base):
    __tablename__ = "participants"

    id = Column(String(32), primary_key=True, default=_new_id)
    event_id = Column(String(32), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    access_token = Column(String, unique=True, nullable=False, index=True)
    assigned_to_id = Column(
        String(32), ForeignKey("participants.id", ondelete="SET NULL"), unique=True, nullable=True
    )
    notification_status = Column(
        Enum(NotificationStatus, name="notification_status"),
        nullable=False,
        default=NotificationStatus.NOT_SENT,
        server_default=NotificationStatus.NOT_SENT.value,
    )
    notified_at = Column(DateTime(timezone=True), nullable=True)
    viewed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    event = relationship("Event", back_populates="participants")

    @property
    def has_viewed(self) -> bool:
        return self.viewed_at is not None

    def __repr__(self) -> str:
        return (
            "<Participant(id={0}, event_id={1}, name={2}, viewed={3})>"
        ).format(self.id, self.event_id, self.name, self.has_viewed)
