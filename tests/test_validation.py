from secret_santa.services.validation import (
    ValidationResult,
    validate_assignments,
    validate_partial_assignments,
)


def test_complete_valid_assignment():
    result = validate_assignments(["A", "B", "C"], {"A": "B", "B": "C", "C": "A"})
    assert result.valid
    assert result.violations == ()


def test_complete_reports_every_violation():
    result = validate_assignments(["A", "B", "C"], {"A": "A", "B": "A", "C": "B"})
    assert not result.valid
    assert result.violations == (
        "Self-assignment detected: A is assigned to themselves",
        "Duplicate receiver: A is assigned to 2 people",
        "Missing receiver: C is not receiving a gift from anyone",
    )


def test_complete_reports_missing_giver():
    result = validate_assignments(["A", "B", "C"], {"A": "B", "B": "A"})
    assert result.violations == (
        "Assignment count mismatch: expected 3, got 2",
        "Missing receiver: C is not receiving a gift from anyone",
        "Missing giver: C is not assigned to give a gift",
    )


def test_complete_validation_is_idempotent():
    assignments = {"A": "B", "B": "B", "C": "A"}
    first = validate_assignments(["A", "B", "C"], assignments)
    second = validate_assignments(["A", "B", "C"], assignments)
    assert first == second


def test_partial_missing_assignment_and_receiver():
    result = validate_partial_assignments(["A", "B", "C"], {"A": "B", "B": "C"})
    assert result.violations == (
        "Missing assignment for participant: C",
        "Participant A receives 0 gifts (should be 1)",
    )


def test_partial_with_separate_receiver_pool():
    result = validate_partial_assignments(["U1", "U2"], {"U1": "L1", "U2": "U1"}, ["L1", "U1"])
    assert result.valid


def test_partial_detects_double_receiver():
    result = validate_partial_assignments(["U1", "U2"], {"U1": "L1", "U2": "L1"}, ["L1", "U1"])
    assert result.violations == (
        "Participant L1 receives 2 gifts (should be 1)",
        "Participant U1 receives 0 gifts (should be 1)",
    )


def test_partial_detects_self_assignment():
    result = validate_partial_assignments(["U1", "U2"], {"U1": "U1", "U2": "U2"})
    assert "Self-assignment detected: U1" in result.violations
    assert "Self-assignment detected: U2" in result.violations


def test_empty_result_is_valid():
    assert ValidationResult().valid
