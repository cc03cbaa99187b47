from __future__ import annotations

import secrets
from dataclasses import dataclass
from typing import Dict, List, Optional

from loguru import logger

from secret_santa.db import Event, Participant, repo
from secret_santa.services.assignment import (
    AssignmentError,
    AssignmentImpossible,
    MaxAttemptsExceeded,
    RandomSource,
    generate_assignments,
    generate_partial_assignments,
)
from secret_santa.services.regeneration import (
    MIN_PARTICIPANTS_FOR_REGENERATION,
    ParticipantState,
    RegenerationAnalysis,
    analyze_regeneration,
)
from secret_santa.services.validation import validate_assignments


class RegenerationBlocked(AssignmentError):
    pass


@dataclass(frozen=True)
class RegenerationStatus:
    has_assignments: bool
    total_participants: int
    viewed: List[Participant]
    unviewed: List[Participant]
    analysis: RegenerationAnalysis


@dataclass(frozen=True)
class RandomizeResult:
    assignments: Dict[str, str]
    attempts: int
    is_partial: bool
    regenerated_count: int
    locked_count: int
    message: str


@dataclass(frozen=True)
class RevealResult:
    participant_name: str
    assigned_to_name: str
    event: Event


def create_event(
    session,
    name: str,
    budget: Optional[str] = None,
    event_date: Optional[str] = None,
    rules: Optional[str] = None,
) -> Event:
    name = (name or "").strip()
    if not name:
        raise ValueError("Event name is required")

    event = repo.create_event(
        session,
        name,
        secrets.token_urlsafe(16),
        _optional_text(budget),
        _optional_text(event_date),
        _optional_text(rules),
    )
    logger.bind(event_id=event.id).info("Event created")
    return event


def add_participant(session, event: Event, name: str, email: Optional[str] = None) -> Participant:
    name = (name or "").strip()
    if not name:
        raise ValueError("Participant name is required")
    return repo.add_participant(
        session, event.id, name, _optional_text(email), secrets.token_urlsafe(16)
    )


def _optional_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


def _participant_states(participants: List[Participant]) -> List[ParticipantState]:
    return [ParticipantState(id=p.id, has_viewed=p.has_viewed) for p in participants]


def get_regeneration_status(session, event: Event) -> RegenerationStatus:
    participants = repo.list_event_participants(session, event.id)
    return RegenerationStatus(
        has_assignments=event.is_locked,
        total_participants=len(participants),
        viewed=[p for p in participants if p.has_viewed],
        unviewed=[p for p in participants if not p.has_viewed],
        analysis=analyze_regeneration(_participant_states(participants)),
    )


def randomize_event(session, event: Event, rng: Optional[RandomSource] = None) -> RandomizeResult:
    """Generate assignments for an event, or regenerate them for unviewed participants.

    Must run inside one transaction per event: the viewed state read here
    has to match the locked assignments written back.
    """
    log = logger.bind(event_id=event.id)
    participants = repo.list_event_participants(session, event.id)
    if len(participants) < MIN_PARTICIPANTS_FOR_REGENERATION:
        raise RegenerationBlocked(
            f"Need at least {MIN_PARTICIPANTS_FOR_REGENERATION} participants to generate assignments"
        )

    analysis = analyze_regeneration(_participant_states(participants))
    if not analysis.can_regenerate:
        log.bind(
            locked_count=len(analysis.locked_ids),
            unlocked_count=len(analysis.unlocked_ids),
        ).warning("Regeneration blocked: {reason}", reason=analysis.reason)
        raise RegenerationBlocked(analysis.reason or "Cannot regenerate assignments")

    if analysis.is_full_regeneration:
        result = _randomize_full(session, participants, rng, log)
        message = "Assignments generated successfully"
        regenerated_count, locked_count = len(participants), 0
    else:
        result = _randomize_partial(session, participants, analysis, rng, log)
        regenerated_count, locked_count = len(analysis.unlocked_ids), len(analysis.locked_ids)
        message = (
            f"Assignments regenerated for {regenerated_count} participants. "
            f"{locked_count} participants kept their original assignments."
        )

    if result.attempts > 1:
        log.bind(
            participant_count=len(participants),
            attempts=result.attempts,
            is_partial=not analysis.is_full_regeneration,
        ).info("Assignment generation succeeded after retry")

    repo.update_event_locked(session, event, True)
    return RandomizeResult(
        assignments=result.assignments,
        attempts=result.attempts,
        is_partial=not analysis.is_full_regeneration,
        regenerated_count=regenerated_count,
        locked_count=locked_count,
        message=message,
    )


def _randomize_full(session, participants: List[Participant], rng, log):
    participant_ids = [p.id for p in participants]
    try:
        result = generate_assignments(participant_ids, rng=rng)
    except MaxAttemptsExceeded as exc:
        log.bind(
            participant_count=len(participant_ids),
            validation_errors=exc.attempt_errors,
        ).error("Full assignment generation failed")
        raise

    if result.attempts > 1:
        log.bind(attempts=result.attempts).warning("Derangement needed more than one attempt")

    repo.clear_assignments(session, participant_ids, reset_viewed=True)
    repo.set_assignments(session, result.assignments)
    return result


def _randomize_partial(session, participants: List[Participant], analysis: RegenerationAnalysis, rng, log):
    locked_assignments = {
        p.id: p.assigned_to_id
        for p in participants
        if p.has_viewed and p.assigned_to_id is not None
    }
    context = log.bind(
        locked_count=len(analysis.locked_ids),
        unlocked_count=len(analysis.unlocked_ids),
    )

    try:
        result = generate_partial_assignments(
            analysis.unlocked_ids,
            locked_assignments,
            locked_ids=analysis.locked_ids,
            rng=rng,
        )
    except MaxAttemptsExceeded as exc:
        context.bind(validation_errors=exc.attempt_errors).error("Partial assignment generation failed")
        raise
    except AssignmentImpossible as exc:
        context.error("Partial assignment generation failed: {error}", error=str(exc))
        raise

    merged = {**locked_assignments, **result.assignments}
    validation = validate_assignments([p.id for p in participants], merged)
    if not validation.valid:
        context.bind(validation_errors=list(validation.violations)).error(
            "Merged assignments are invalid"
        )
        raise AssignmentImpossible("Regenerated assignments conflict with locked assignments.")

    repo.clear_assignments(session, analysis.unlocked_ids)
    repo.set_assignments(session, result.assignments)
    context.bind(attempts=result.attempts).info("Partial regeneration successful")
    return result


def reveal_assignment(session, access_token: str) -> Optional[RevealResult]:
    participant = repo.get_participant_by_access_token(session, access_token)
    if not participant:
        return None

    receiver = None
    if participant.assigned_to_id is not None:
        receiver = repo.get_participant_by_id(session, participant.assigned_to_id)
    if not participant.event.is_locked or receiver is None:
        raise AssignmentError("Assignments have not been generated yet")

    if not participant.has_viewed:
        repo.mark_participant_viewed(session, participant)
        logger.bind(event_id=participant.event_id, participant_id=participant.id).info(
            "Assignment viewed"
        )

    return RevealResult(
        participant_name=participant.name,
        assigned_to_name=receiver.name,
        event=participant.event,
    )


def mark_notified(session, participant: Participant) -> None:
    repo.mark_participant_notified(session, participant)
