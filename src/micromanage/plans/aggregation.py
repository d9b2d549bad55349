"""Group status derivation and progress summaries."""

from typing import Sequence

from .models import Group
from .status import Status


def derive_group_status(unit_statuses: Sequence[Status], previous: Status) -> Status:
	"""
	Derive a group's status from the statuses of its units.

	First match wins:
		1. every unit completed -> completed
		2. some unit in user_review and none in_progress -> user_review
		3. some unit in_progress -> in_progress
		4. some unit needs_refinement and none in_progress -> needs_refinement

	When nothing matches (e.g. only cancelled and not_started units) the group
	keeps `previous`.

	Raises:
		ValueError: If `unit_statuses` is empty
	"""
	if not unit_statuses:
		raise ValueError("Cannot derive a group status from an empty unit list")

	any_in_progress = Status.IN_PROGRESS in unit_statuses

	if all(s == Status.COMPLETED for s in unit_statuses):
		return Status.COMPLETED
	if Status.USER_REVIEW in unit_statuses and not any_in_progress:
		return Status.USER_REVIEW
	if any_in_progress:
		return Status.IN_PROGRESS
	if Status.NEEDS_REFINEMENT in unit_statuses and not any_in_progress:
		return Status.NEEDS_REFINEMENT
	return previous


def refresh_group_status(group: Group) -> Status:
	"""Recompute and store a group's status. Returns the new status."""
	group.status = derive_group_status([u.status for u in group.units], group.status)
	return group.status


def percent(done: int, total: int) -> int:
	"""Whole-number percentage, 0 when there is nothing to count."""
	return round(done / total * 100) if total else 0


def summarize_groups(groups: Sequence[Group]) -> list[dict]:
	"""Per-group progress summaries."""
	summaries = []
	for index, group in enumerate(groups):
		completed = sum(1 for u in group.units if u.status == Status.COMPLETED)
		total = len(group.units)
		summaries.append({
			"group_index": index,
			"goal": group.goal,
			"status": group.status.value,
			"developer_note": group.developer_note,
			"units": {
				"completed": completed,
				"total": total,
				"percent_complete": percent(completed, total),
			},
		})
	return summaries
