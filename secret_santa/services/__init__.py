from secret_santa.services.assignment import (
    AssignmentError,
    AssignmentImpossible,
    CountMismatch,
    GenerationResult,
    InsufficientItems,
    MaxAttemptsExceeded,
    generate_assignments,
    generate_partial_assignments,
)
from secret_santa.services.regeneration import RegenerationAnalysis, analyze_regeneration
from secret_santa.services.validation import ValidationResult

__all__ = [
    "AssignmentError",
    "AssignmentImpossible",
    "CountMismatch",
    "GenerationResult",
    "InsufficientItems",
    "MaxAttemptsExceeded",
    "RegenerationAnalysis",
    "ValidationResult",
    "analyze_regeneration",
    "generate_assignments",
    "generate_partial_assignments",
]
