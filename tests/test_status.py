"""Tests for unit statuses and the transition rules."""

import pytest

from micromanage.plans.status import STATUS_DISPLAY, Status, validate_transition

NS = Status.NOT_STARTED
IP = Status.IN_PROGRESS
UR = Status.USER_REVIEW
C = Status.COMPLETED
X = Status.CANCELLED
NR = Status.NEEDS_REFINEMENT

# (current, new, allowed) for every pair of statuses
TRANSITIONS = [
	(NS, NS, True), (NS, IP, False), (NS, UR, False), (NS, C, False), (NS, X, True), (NS, NR, True),
	(IP, NS, True), (IP, IP, True), (IP, UR, True), (IP, C, False), (IP, X, True), (IP, NR, True),
	(UR, NS, True), (UR, IP, False), (UR, UR, True), (UR, C, True), (UR, X, True), (UR, NR, True),
	(C, NS, True), (C, IP, False), (C, UR, True), (C, C, True), (C, X, True), (C, NR, True),
	(X, NS, True), (X, IP, False), (X, UR, True), (X, C, False), (X, X, True), (X, NR, True),
	(NR, NS, True), (NR, IP, True), (NR, UR, True), (NR, C, False), (NR, X, True), (NR, NR, True),
]


def test_transition_table_covers_every_pair():
	assert len(TRANSITIONS) == 36
	assert {(c, n) for c, n, _ in TRANSITIONS} == {(c, n) for c in Status for n in Status}


@pytest.mark.parametrize("current,new,allowed", TRANSITIONS)
def test_transition_table(current, new, allowed):
	result = validate_transition(current, new)
	assert result.is_valid is allowed
	if allowed:
		assert result.error_message is None
		assert result.correct_path is None
	else:
		assert result.error_message
		assert "Correct path:" in result.error_message
		assert result.correct_path in result.error_message


def test_completion_requires_review_path():
	result = validate_transition(IP, C)
	assert result.correct_path == '"in_progress" -> "user_review" -> "completed"'
	assert "user review" in result.error_message


def test_start_requires_refinement_path():
	result = validate_transition(UR, IP)
	assert result.correct_path == '"user_review" -> "needs_refinement" -> "in_progress"'


def test_not_started_to_review_points_at_refinement():
	result = validate_transition(NS, UR)
	assert result.correct_path == '"not_started" -> "needs_refinement" -> "in_progress"'
	assert 'Direct transition from "not_started" to "user_review"' in result.error_message


def test_not_started_to_completed_hits_review_rule_first():
	"""Rule order matters: completion rule fires before the not_started rule."""
	result = validate_transition(NS, C)
	assert result.correct_path == '"not_started" -> "user_review" -> "completed"'


def test_status_values_are_snake_case():
	assert [s.value for s in Status] == [
		"not_started", "in_progress", "user_review", "completed", "cancelled", "needs_refinement",
	]


@pytest.mark.parametrize("raw", ["needsRefinment", "needsRefinement", "NEEDSREFINMENT"])
def test_legacy_refinement_spelling_is_accepted(raw):
	assert Status(raw) is Status.NEEDS_REFINEMENT


def test_unknown_status_is_rejected():
	with pytest.raises(ValueError):
		Status("blocked")


def test_every_status_has_display_info():
	assert set(STATUS_DISPLAY) == set(Status)
	for status in Status:
		info = status.describe()
		assert info["display_name"]
		assert info["description"]
