from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, NamedTuple, Optional, Tuple

MIN_PARTICIPANTS_FOR_REGENERATION = 3


class ParticipantState(NamedTuple):
    id: str
    has_viewed: bool


@dataclass(frozen=True)
class RegenerationAnalysis:
    can_regenerate: bool
    is_full_regeneration: bool
    locked_ids: Tuple[str, ...]
    unlocked_ids: Tuple[str, ...]
    reason: Optional[str] = None


def analyze_regeneration(participants: Iterable[ParticipantState]) -> RegenerationAnalysis:
    """Decide whether assignments can be (re)generated right now.

    Participants who viewed their assignment are locked and keep it. Nobody
    locked means a full regeneration; otherwise only the unlocked ones are
    reshuffled, and there must be enough of them to shuffle.
    """
    participants = list(participants)
    locked_ids = tuple(p.id for p in participants if p.has_viewed)
    unlocked_ids = tuple(p.id for p in participants if not p.has_viewed)
    minimum = MIN_PARTICIPANTS_FOR_REGENERATION

    if not locked_ids:
        enough = len(participants) >= minimum
        return RegenerationAnalysis(
            can_regenerate=enough,
            is_full_regeneration=True,
            locked_ids=(),
            unlocked_ids=unlocked_ids,
            reason=None if enough else f"Need at least {minimum} participants to generate assignments",
        )

    if len(unlocked_ids) < minimum:
        return RegenerationAnalysis(
            can_regenerate=False,
            is_full_regeneration=False,
            locked_ids=locked_ids,
            unlocked_ids=unlocked_ids,
            reason=(
                f"Cannot regenerate: {len(locked_ids)} participant(s) have already viewed "
                f"their assignments. Only {len(unlocked_ids)} participant(s) haven't viewed "
                f"yet, but you need at least {minimum} to create new assignments. "
                "Add more participants to enable regeneration."
            ),
        )

    return RegenerationAnalysis(
        can_regenerate=True,
        is_full_regeneration=False,
        locked_ids=locked_ids,
        unlocked_ids=unlocked_ids,
    )
