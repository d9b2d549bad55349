"""
WorkPlan - owner of the single active plan.

Every command validates its input completely before touching state, so a
rejected command never leaves a partial change behind. After a change the
whole plan is written back through the SnapshotStore; a failed write is
reported as `memory_only` instead of failing the command.
"""

import logging
from datetime import datetime
from typing import Optional

from .aggregation import percent, refresh_group_status, summarize_groups
from .errors import (
	IndexOutOfRangeError,
	InvalidOperationError,
	InvalidTransitionError,
	MissingRequiredFieldError,
	NoActivePlanError,
	NotInitializedError,
)
from .models import (
	EMPTY_PLAN,
	GOAL_MAX_LENGTH,
	NOTE_MAX_LENGTH,
	SCHEMA_VERSION,
	Group,
	Plan,
	PlanSpec,
	Snapshot,
)
from .status import Status, validate_transition
from .store import SaveResult, SnapshotStore

logger = logging.getLogger(__name__)

# unit_index value that addresses the group itself
GROUP_ADDRESS = -1

PERSISTENCE_SAVED = "saved"
PERSISTENCE_MEMORY_ONLY = "memory_only"


class WorkPlan:
	"""
	The in-memory work plan backed by a snapshot file.

	Usage:
		workplan = WorkPlan(SnapshotStore(config.workplan_path))
		workplan.initialize()

		workplan.define_plan(PlanSpec(goal="Add login", groups=[...]))
		workplan.update_unit_status(0, 0, Status.NEEDS_REFINEMENT)
		report = workplan.get_progress()
	"""

	def __init__(self, store: SnapshotStore):
		self._store = store
		self._plan: Optional[Plan] = None
		self._last_updated = datetime.now().isoformat()
		self._initialized = False

	@property
	def store(self) -> SnapshotStore:
		return self._store

	@property
	def plan(self) -> Optional[Plan]:
		"""The active plan, or None when no plan has been defined."""
		return self._plan

	@property
	def last_updated(self) -> str:
		return self._last_updated

	@property
	def is_ready(self) -> bool:
		"""Whether initialize() has completed."""
		return self._initialized

	def initialize(self) -> bool:
		"""
		Load the stored snapshot and mark the work plan ready.

		Writes an initial snapshot when none exists yet.

		Returns:
			True on success, False if storage could not be set up
		"""
		logger.info(f"Initializing WorkPlan with data file: {self._store.path}")
		try:
			self._load_state()
			if not self._store.exists():
				logger.info("Creating initial data file as it does not exist")
				self._save_state()
		except OSError as e:
			logger.error(f"WorkPlan initialization failed: {e}")
			return False

		self._initialized = True
		logger.info(f"WorkPlan initialized. Using data file: {self._store.path}")
		return True

	def snapshot(self) -> Snapshot:
		"""The current state in its persisted form."""
		return Snapshot(
			plan=self._plan if self._plan is not None else EMPTY_PLAN,
			last_updated=self._last_updated,
			schema_version=SCHEMA_VERSION,
		)

	def reload(self) -> bool:
		"""Re-read the snapshot file, replacing the in-memory state."""
		try:
			self._load_state()
		except OSError as e:
			logger.error(f"Failed to reload data: {e}")
			return False
		return True

	def force_save(self) -> bool:
		"""Write the current state immediately. Used on shutdown."""
		return self._save_state().ok

	# -- commands --

	def define_plan(self, spec: PlanSpec) -> dict:
		"""
		Replace any existing plan with a new one built from `spec`.

		Every group and unit starts as not_started.

		Returns:
			Counts of created groups/units, whether a plan was replaced, and
			the persistence outcome
		"""
		self._require_ready()

		plan = spec.build()
		replaced = self._plan is not None
		self._plan = plan
		saved = self._save_state()

		group_count = len(plan.groups)
		unit_count = plan.unit_count
		message = f"Implementation plan created with {group_count} groups and {unit_count} units."
		if replaced:
			message = f"Previous plan has been replaced. {message}"
		logger.info(message)

		return {
			"success": True,
			"group_count": group_count,
			"unit_count": unit_count,
			"replaced": replaced,
			"message": message,
			**self._persistence_fields(saved),
		}

	def get_progress(self) -> dict:
		"""Progress counts, per-group summaries and the full unit listing."""
		self._require_ready()
		plan = self._require_plan()

		progress = plan.get_progress()
		logger.info(
			f"Progress: {progress['completed_groups']}/{progress['total_groups']} groups, "
			f"{progress['completed_units']}/{progress['total_units']} units"
		)

		return {
			"goal": plan.goal,
			"needs_more_thoughts": plan.needs_more_thoughts,
			"progress": {
				"groups": f"{progress['completed_groups']}/{progress['total_groups']}",
				"units": f"{progress['completed_units']}/{progress['total_units']}",
				"percent_complete": percent(progress["completed_units"], progress["total_units"]),
			},
			"groups": summarize_groups(plan.groups),
			"detailed_groups": [
				{
					"group_index": group_index,
					"goal": group.goal,
					"status": group.status.value,
					"developer_note": group.developer_note,
					"units": [
						{
							"unit_index": unit_index,
							"goal": unit.goal,
							"status": unit.status.value,
							"developer_note": unit.developer_note,
						}
						for unit_index, unit in enumerate(group.units)
					],
				}
				for group_index, group in enumerate(plan.groups)
			],
			"persistence_info": {
				"data_file_path": str(self._store.path),
				"file_exists": self._store.exists(),
				"last_updated": self._last_updated,
			},
		}

	def update_unit_status(
		self,
		group_index: int,
		unit_index: int,
		status: Optional[Status] = None,
		goal: Optional[str] = None,
		developer_note: Optional[str] = None,
	) -> dict:
		"""
		Change a unit's status, and optionally its goal and developer note.

		A unit_index of -1 addresses the group itself; only its developer note
		can be changed that way (see update_group_note).

		Starting a unit (in_progress) resets every other in-progress unit in
		the plan to not_started.

		Raises:
			NotInitializedError, NoActivePlanError, IndexOutOfRangeError,
			MissingRequiredFieldError, InvalidOperationError, InvalidTransitionError
		"""
		self._require_ready()
		plan = self._require_plan()

		if unit_index == GROUP_ADDRESS:
			self._group_at(plan, group_index)
			if status is not None or goal is not None:
				raise InvalidOperationError(
					"When updating a group directly (unit_index -1), only developer_note can be "
					"changed. Group status is derived from its units."
				)
			return self.update_group_note(group_index, developer_note)

		group = self._group_at(plan, group_index)
		if not 0 <= unit_index < len(group.units):
			raise IndexOutOfRangeError(
				f"Invalid unit_index: must be between 0 and {len(group.units) - 1} (or -1 for the group)"
			)
		if status is None:
			raise MissingRequiredFieldError("status is required when updating a unit")
		if goal is not None:
			goal = goal.strip()
		_check_goal(goal)
		_check_note(developer_note)

		unit = group.units[unit_index]
		check = validate_transition(unit.status, status)
		if not check.is_valid:
			logger.warning(
				f"Rejected transition for group #{group_index}, unit #{unit_index}: "
				f"{unit.status.value} -> {status.value}"
			)
			raise InvalidTransitionError(check.error_message or "Invalid status transition", check.correct_path)

		logger.info(f'Updating status for group #{group_index}, unit #{unit_index} to "{status.value}"')
		changes: list[str] = []

		reset: list[tuple[int, int]] = []
		if status == Status.IN_PROGRESS:
			for g, u, other in plan.iter_units():
				if (g, u) != (group_index, unit_index) and other.status == Status.IN_PROGRESS:
					other.status = Status.NOT_STARTED
					reset.append((g, u))
					logger.info(f'Reset group #{g}, unit #{u} from "in_progress" to "not_started"')
			if reset:
				noun = "task" if len(reset) == 1 else "tasks"
				changes.append(f'{len(reset)} other in-progress {noun} reset to "not_started"')

		unit.status = status
		changes.append(f'status updated to "{status.value}"')

		if goal is not None:
			unit.goal = goal
			changes.append(f'goal updated to "{goal}"')
		if developer_note is not None:
			unit.developer_note = developer_note
			changes.append("developer note updated")

		for g in sorted({group_index} | {g for g, _ in reset}):
			refresh_group_status(plan.groups[g])

		saved = self._save_state()
		message = f"Unit #{unit_index} of group #{group_index}: {' and '.join(changes)}."
		logger.info(message)

		return {
			"success": True,
			"message": message,
			"group_index": group_index,
			"unit_index": unit_index,
			"status": status.value,
			"group_status": group.status.value,
			"goal": goal,
			"developer_note": developer_note,
			"reset_count": len(reset),
			"reset_units": [{"group_index": g, "unit_index": u} for g, u in reset],
			**self._persistence_fields(saved),
		}

	def update_group_note(self, group_index: int, developer_note: Optional[str]) -> dict:
		"""Set a group's developer note without touching its units."""
		self._require_ready()
		plan = self._require_plan()
		group = self._group_at(plan, group_index)

		if developer_note is None:
			raise MissingRequiredFieldError(
				"When updating a group directly (unit_index -1), developer_note must be provided"
			)
		_check_note(developer_note)

		group.developer_note = developer_note
		saved = self._save_state()
		logger.info(f"Updated developer note of group #{group_index}")

		return {
			"success": True,
			"message": f"Group #{group_index} developer note updated.",
			"group_index": group_index,
			"developer_note": developer_note,
			**self._persistence_fields(saved),
		}

	# -- internals --

	def _require_ready(self) -> None:
		if not self._initialized:
			raise NotInitializedError()

	def _require_plan(self) -> Plan:
		if self._plan is None:
			raise NoActivePlanError()
		return self._plan

	@staticmethod
	def _group_at(plan: Plan, group_index: int) -> Group:
		if not 0 <= group_index < len(plan.groups):
			raise IndexOutOfRangeError(
				f"Invalid group_index: must be between 0 and {len(plan.groups) - 1}"
			)
		return plan.groups[group_index]

	def _load_state(self) -> None:
		snapshot = self._store.load(Snapshot(last_updated=self._last_updated))
		self._plan = snapshot.active_plan
		self._last_updated = snapshot.last_updated

		if self._plan is None:
			logger.info("No active plan found in loaded state")
		else:
			logger.info(f"Loaded plan with goal: {self._plan.goal}, {len(self._plan.groups)} groups")

	def _save_state(self) -> SaveResult:
		self._last_updated = datetime.now().isoformat()
		return self._store.save(self.snapshot())

	def _persistence_fields(self, saved: SaveResult) -> dict:
		fields: dict = {
			"persistence_status": PERSISTENCE_SAVED if saved.ok else PERSISTENCE_MEMORY_ONLY,
			"last_updated": self._last_updated,
		}
		if not saved.ok:
			fields["warning"] = f"Changes are kept in memory only; saving failed: {saved.error}"
		return fields


def _check_goal(goal: Optional[str]) -> None:
	if goal is None:
		return
	if not goal:
		raise InvalidOperationError("Goal must be a non-empty string")
	if len(goal) > GOAL_MAX_LENGTH:
		raise InvalidOperationError(
			f"Goal must be at most {GOAL_MAX_LENGTH} characters. "
			"Consider moving detailed information to the developer_note field."
		)


def _check_note(developer_note: Optional[str]) -> None:
	if developer_note is not None and len(developer_note) > NOTE_MAX_LENGTH:
		raise InvalidOperationError(
			f"Developer note must be at most {NOTE_MAX_LENGTH} characters. "
			"Consider breaking it into smaller, focused notes."
		)
