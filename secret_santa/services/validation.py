from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class ValidationResult:
    violations: Tuple[str, ...] = ()

    @property
    def valid(self) -> bool:
        return not self.violations


def validate_assignments(
    participant_ids: Sequence[str],
    assignments: Mapping[str, str],
) -> ValidationResult:
    """Check a complete assignment set over ``participant_ids``.

    Everybody gives exactly once, receives exactly once and never to
    themselves. Every problem found is reported, not only the first.
    """
    violations = []

    if len(assignments) != len(participant_ids):
        violations.append(
            f"Assignment count mismatch: expected {len(participant_ids)}, got {len(assignments)}"
        )

    for giver, receiver in assignments.items():
        if giver == receiver:
            violations.append(f"Self-assignment detected: {giver} is assigned to themselves")

    receiver_counts = Counter(assignments.values())
    for receiver, count in receiver_counts.items():
        if count > 1:
            violations.append(f"Duplicate receiver: {receiver} is assigned to {count} people")

    for participant_id in participant_ids:
        if participant_id not in receiver_counts:
            violations.append(
                f"Missing receiver: {participant_id} is not receiving a gift from anyone"
            )

    for participant_id in participant_ids:
        if participant_id not in assignments:
            violations.append(f"Missing giver: {participant_id} is not assigned to give a gift")

    return ValidationResult(violations=tuple(violations))


def validate_partial_assignments(
    participant_ids: Sequence[str],
    assignments: Mapping[str, str],
    receiver_ids: Optional[Sequence[str]] = None,
) -> ValidationResult:
    """Check the reassigned part of an event.

    ``participant_ids`` are the givers being reassigned. ``receiver_ids`` are
    the participants that must get exactly one incoming edge from within
    ``assignments``; it defaults to the givers themselves.
    """
    if receiver_ids is None:
        receiver_ids = participant_ids

    violations = []

    for participant_id in participant_ids:
        if participant_id not in assignments:
            violations.append(f"Missing assignment for participant: {participant_id}")

    for giver, receiver in assignments.items():
        if giver == receiver:
            violations.append(f"Self-assignment detected: {giver}")

    receiver_counts = Counter(assignments.values())
    for participant_id in receiver_ids:
        count = receiver_counts.get(participant_id, 0)
        if count != 1:
            violations.append(
                f"Participant {participant_id} receives {count} gifts (should be 1)"
            )

    return ValidationResult(violations=tuple(violations))
