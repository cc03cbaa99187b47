from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Protocol, Sequence

from secret_santa.services.validation import (
    ValidationResult,
    validate_assignments,
    validate_partial_assignments,
)

ParticipantId = str
Assignments = Dict[ParticipantId, ParticipantId]

MAX_ATTEMPTS = 5


class AssignmentError(RuntimeError):
    pass


class InsufficientItems(AssignmentError):
    pass


class CountMismatch(AssignmentError):
    pass


class AssignmentImpossible(AssignmentError):
    pass


class MaxAttemptsExceeded(AssignmentError):
    def __init__(self, message: str, attempt_errors: List[List[str]]) -> None:
        super().__init__(message)
        self.attempt_errors = attempt_errors


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int:
        ...


@dataclass(frozen=True)
class GenerationResult:
    assignments: Assignments
    attempts: int


def _resolve_rng(rng: Optional[RandomSource], seed: Optional[int]) -> RandomSource:
    if rng is not None:
        return rng
    return random.Random(seed)


def generate_derangement(
    items: Sequence[ParticipantId],
    rng: Optional[RandomSource] = None,
) -> Assignments:
    """Map every item to another one, forming a single cycle.

    Sattolo's algorithm: the swap index is drawn from ``[0, i)`` instead of
    ``[0, i]``, so the permutation is one cycle of length ``n`` and nobody
    keeps their own position.
    """
    if len(items) < 2:
        raise InsufficientItems("At least 2 participants are required.")

    rng = _resolve_rng(rng, None)
    shuffled = list(items)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return {original: assigned for original, assigned in zip(items, shuffled)}


def generate_bipartite(
    givers: Sequence[ParticipantId],
    receivers: Sequence[ParticipantId],
    rng: Optional[RandomSource] = None,
) -> Assignments:
    """Pair givers with a uniformly shuffled copy of receivers.

    Self-assignment is possible when an id is in both pools; callers
    validate and retry.
    """
    if len(givers) != len(receivers):
        raise CountMismatch(
            f"Cannot pair {len(givers)} givers with {len(receivers)} receivers."
        )

    rng = _resolve_rng(rng, None)
    shuffled = list(receivers)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randrange(i + 1)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]

    return dict(zip(givers, shuffled))


def with_retries(
    max_attempts: int,
    generate: Callable[[], Assignments],
    validate: Callable[[Assignments], ValidationResult],
) -> GenerationResult:
    attempt_errors: List[List[str]] = []
    for attempt in range(1, max_attempts + 1):
        assignments = generate()
        validation = validate(assignments)
        if validation.valid:
            return GenerationResult(assignments=assignments, attempts=attempt)
        attempt_errors.append(list(validation.violations))

    raise MaxAttemptsExceeded(
        f"Failed to generate valid assignments after {max_attempts} attempts.",
        attempt_errors,
    )


def generate_assignments(
    participant_ids: Sequence[ParticipantId],
    rng: Optional[RandomSource] = None,
    seed: Optional[int] = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> GenerationResult:
    if len(participant_ids) < 2:
        raise InsufficientItems("At least 2 participants are required.")

    rng = _resolve_rng(rng, seed)
    participants = list(participant_ids)
    return with_retries(
        max_attempts,
        lambda: generate_derangement(participants, rng),
        lambda assignments: validate_assignments(participants, assignments),
    )


def build_receiver_pool(
    locked_assignments: Dict[ParticipantId, ParticipantId],
    locked_ids: Sequence[ParticipantId],
    unlocked_ids: Sequence[ParticipantId],
) -> List[ParticipantId]:
    """Receivers still needing an incoming edge once locked edges are kept.

    A locked giver whose own giver is being reshuffled needs a new one, as
    does every unlocked participant not already receiving from a locked giver.
    """
    locked_receivers = set(locked_assignments.values())
    receivers = [pid for pid in locked_ids if pid not in locked_receivers]
    receivers.extend(pid for pid in unlocked_ids if pid not in locked_receivers)

    if len(receivers) != len(unlocked_ids):
        raise AssignmentImpossible(
            "Locked assignments are inconsistent with participant state: "
            f"{len(unlocked_ids)} givers but {len(receivers)} available receivers."
        )
    return receivers


def generate_partial_assignments(
    unlocked_ids: Sequence[ParticipantId],
    locked_assignments: Dict[ParticipantId, ParticipantId],
    locked_ids: Optional[Sequence[ParticipantId]] = None,
    rng: Optional[RandomSource] = None,
    seed: Optional[int] = None,
    max_attempts: int = MAX_ATTEMPTS,
) -> GenerationResult:
    """New edges for unlocked givers only; locked edges are left to the caller."""
    if locked_ids is None:
        locked_ids = list(locked_assignments)

    givers = list(unlocked_ids)
    receivers = build_receiver_pool(locked_assignments, locked_ids, givers)

    rng = _resolve_rng(rng, seed)
    return with_retries(
        max_attempts,
        lambda: generate_bipartite(givers, receivers, rng),
        lambda assignments: validate_partial_assignments(givers, assignments, receivers),
    )
