"""
Unit status values and the transition rules between them.

Units move through a fixed workflow:

	not_started -> needs_refinement -> in_progress -> user_review -> completed

with cancelled reachable from anywhere and needs_refinement reachable from any
started state. validate_transition() is pure so the whole table can be tested.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Status(str, Enum):
	"""Status of a unit (and, derived, of its group)."""
	NOT_STARTED = "not_started"
	IN_PROGRESS = "in_progress"
	USER_REVIEW = "user_review"
	COMPLETED = "completed"
	CANCELLED = "cancelled"
	NEEDS_REFINEMENT = "needs_refinement"

	@classmethod
	def _missing_(cls, value: object) -> Optional["Status"]:
		# Older snapshots spell it "needsRefinment"
		if isinstance(value, str) and value.lower() in ("needsrefinment", "needsrefinement"):
			return cls.NEEDS_REFINEMENT
		return None

	def describe(self) -> dict[str, str]:
		"""Display name and description for this status."""
		return STATUS_DISPLAY[self]


STATUS_DISPLAY: dict[Status, dict[str, str]] = {
	Status.NOT_STARTED: {
		"display_name": "Not started",
		"description": "Work on this task has not begun",
	},
	Status.IN_PROGRESS: {
		"display_name": "In progress",
		"description": "The task currently being worked on",
	},
	Status.USER_REVIEW: {
		"display_name": "Awaiting user review",
		"description": "The implementation is waiting for the user to review it",
	},
	Status.COMPLETED: {
		"display_name": "Completed",
		"description": "The task was finished and approved",
	},
	Status.CANCELLED: {
		"display_name": "Cancelled",
		"description": "The task was abandoned",
	},
	Status.NEEDS_REFINEMENT: {
		"display_name": "Needs refinement",
		"description": "The task requirements need to be clarified before work starts",
	},
}


@dataclass(frozen=True)
class TransitionResult:
	"""Outcome of validating a status change."""
	is_valid: bool
	error_message: Optional[str] = None
	correct_path: Optional[str] = None


_OK = TransitionResult(is_valid=True)

_REFINEMENT_STEPS = (
	"In the refinement phase, you should:\n"
	"- Clarify and confirm your understanding of the task requirements\n"
	"- Review existing code to identify impacts and reference points\n"
	"- Create a detailed implementation plan at the unit level\n"
	"- Check if changes to other unit plans are needed\n"
)


def _path(*steps: Status | str) -> str:
	return " -> ".join(f'"{s.value if isinstance(s, Status) else s}"' for s in steps)


def validate_transition(current: Status, new: Status) -> TransitionResult:
	"""
	Decide whether a unit may move from `current` to `new`.

	Rules, first match wins:
		1. Same status is always allowed.
		2. completed is only reachable from user_review.
		3. in_progress is only reachable from needs_refinement.
		4. not_started may only move to needs_refinement or cancelled.
		5. Anything else is allowed.
	"""
	if current == new:
		return _OK

	if new == Status.COMPLETED and current != Status.USER_REVIEW:
		path = _path(current, Status.USER_REVIEW, Status.COMPLETED)
		return TransitionResult(
			is_valid=False,
			error_message=(
				'Tasks can only be marked as "completed" after going through user review.\n'
				"In the user review phase:\n"
				"- The implementation is reviewed by the user\n"
				"- Feedback is gathered on the implementation\n"
				"- User approves the changes before completion\n\n"
				f'Direct transition from "{current.value}" to "completed" is not allowed.\n'
				f"Correct path: {path}"
			),
			correct_path=path,
		)

	if new == Status.IN_PROGRESS and current != Status.NEEDS_REFINEMENT:
		path = _path(current, Status.NEEDS_REFINEMENT, Status.IN_PROGRESS)
		return TransitionResult(
			is_valid=False,
			error_message=(
				'Tasks can only enter "in_progress" after going through the refinement phase.\n'
				f"{_REFINEMENT_STEPS}\n"
				f'Direct transition from "{current.value}" to "in_progress" is not allowed.\n'
				f"Correct path: {path}"
			),
			correct_path=path,
		)

	if current == Status.NOT_STARTED and new not in (Status.NEEDS_REFINEMENT, Status.CANCELLED):
		path = _path(Status.NOT_STARTED, Status.NEEDS_REFINEMENT, Status.IN_PROGRESS)
		return TransitionResult(
			is_valid=False,
			error_message=(
				"Tasks must go through the refinement phase before implementation.\n"
				f"{_REFINEMENT_STEPS}\n"
				f'Direct transition from "not_started" to "{new.value}" is not allowed.\n'
				f"Correct path: {path}"
			),
			correct_path=path,
		)

	return _OK
