"""Work plan tools: plan, track, update."""

import json
import logging
from typing import Any, Callable

from mcp.server.fastmcp import FastMCP
from pydantic import ValidationError

from ..config import Config
from ..plans.errors import WorkPlanError
from ..plans.models import GOAL_MAX_LENGTH, NOTE_MAX_LENGTH, PlanSpec
from ..plans.status import Status
from ..plans.workplan import WorkPlan
from ..prompts import PLANNING_GUIDE, PROGRESS_INSTRUCTION, STATUS_UPDATE_RULES

logger = logging.getLogger(__name__)

PLAN_VALIDATION_HINTS = f"""Suggestions for fixing plan validation errors:
- Keep goal fields concise (max {GOAL_MAX_LENGTH} characters) and focused on WHAT will be done
- Put implementation details in developer notes (max {NOTE_MAX_LENGTH} characters)
- Provide at least one group, and at least one unit in every group"""


def error_response(message: str, error_type: str, **extra: object) -> str:
	"""JSON error payload returned by every tool on failure."""
	return json.dumps({
		"error": message,
		"error_type": error_type,
		"status": "failed",
		**extra,
	}, indent=2)


def _work_plan_error(tool: str, error: WorkPlanError) -> str:
	logger.error(f"{tool} rejected: {error}")
	return json.dumps(error.to_dict(), indent=2)


def _internal_error(tool: str, error: Exception) -> str:
	logger.exception(f"Unexpected error in {tool}")
	return error_response(str(error), "internal_error")


def describe_plan_validation_error(error: ValidationError) -> str:
	"""Turn pydantic errors on plan input into guidance for the caller."""
	lines = []
	for err in error.errors():
		loc = ".".join(str(part) for part in err["loc"])
		field = str(err["loc"][-1]) if err["loc"] else ""
		if err["type"] == "string_too_long" and field == "goal":
			lines.append(
				f"{loc}: goal exceeds {GOAL_MAX_LENGTH} characters. Move implementation details "
				"to the developer_note field; goals describe WHAT, notes explain HOW."
			)
		elif err["type"] == "string_too_long" and field in ("developer_note", "developerNote"):
			lines.append(
				f"{loc}: developer note exceeds {NOTE_MAX_LENGTH} characters. Break it into smaller, "
				"focused notes or split the work into separate units."
			)
		else:
			lines.append(f"{loc}: {err['msg']}")
	return "Validation Error: The provided data does not meet requirements.\n\n" + "\n".join(lines)


def register_plan_tools(mcp: FastMCP, config: Config, workplan: WorkPlan) -> None:
	"""Register work plan tools and the planning prompt."""

	def _guarded(tool: str, command: Callable[[], dict]) -> str:
		try:
			return json.dumps(command(), indent=2)
		except WorkPlanError as e:
			return _work_plan_error(tool, e)
		except Exception as e:
			return _internal_error(tool, e)

	@mcp.tool()
	async def plan(
		goal: str,
		groups: list[dict[str, Any]],
		needs_more_thoughts: bool = False,
	) -> str:
		"""
		Register the whole work plan for the ticket you are assigned to,
		organized as groups (PRs) of units (commits). Replaces any existing plan.

		Before using this tool you MUST:
		- Understand the requirements, goals and specifications.
		- Break the scope down into a hierarchy of groups and units.
		- Analyze the existing codebase and the impacted area.
		- Record implementation considerations in developer notes.

		Goals must be clear enough to stand alone without their developer notes.

		Args:
			goal: What the ticket achieves (max 60 characters)
			groups: Ordered groups, each {goal, units: [{goal, developer_note?}], developer_note?}
			needs_more_thoughts: Set if the plan may still need changes
		"""
		logger.info(f"Plan tool called with goal: {goal}, groups: {len(groups)}")
		try:
			spec = PlanSpec(
				goal=goal,
				groups=groups,
				needs_more_thoughts=needs_more_thoughts or None,
			)
		except ValidationError as e:
			logger.error(f"Plan input rejected: {e.error_count()} validation errors")
			return error_response(
				f"{describe_plan_validation_error(e)}\n\n{PLAN_VALIDATION_HINTS}",
				"invalid_input",
			)
		return _guarded("plan", lambda: workplan.define_plan(spec))

	@mcp.tool()
	async def track() -> str:
		"""
		Report the progress of the current work plan: completed groups and units,
		per-group summaries, and every unit with its developer notes.

		Always follow the agent_instruction field of the response.
		"""
		logger.info("Track tool called")

		def _progress() -> dict:
			report = workplan.get_progress()
			report["agent_instruction"] = PROGRESS_INSTRUCTION
			return report

		return _guarded("track", _progress)

	@mcp.tool()
	async def update(
		group_index: int,
		unit_index: int,
		status: str = "",
		goal: str = "",
		developer_note: str = "",
	) -> str:
		"""
		Update the status, goal or developer note of a unit.

		Rules:
		- not_started can only move to needs_refinement or cancelled.
		- in_progress is only reachable from needs_refinement.
		- completed is only reachable from user_review.
		- Only one unit can be in_progress; starting one resets the others to not_started.
		- When moving a unit to user_review, you MUST write a review request for the user.

		After the update, call 'track' and read the developer notes of the next unit.

		Args:
			group_index: Zero-based index of the group
			unit_index: Zero-based index of the unit in the group, or -1 to annotate the group itself
			status: not_started, in_progress, user_review, completed, cancelled, needs_refinement
				(required unless unit_index is -1)
			goal: New goal for the unit (optional)
			developer_note: Implementation notes for the unit, or for the group when unit_index is -1
		"""
		logger.info(f"Update tool called for group #{group_index}, unit #{unit_index}, status: {status or '-'}")

		new_status = None
		if status:
			try:
				new_status = Status(status)
			except ValueError:
				return error_response(
					f"Invalid status: {status}",
					"invalid_input",
					valid_statuses=[s.value for s in Status],
				)

		return _guarded("update", lambda: workplan.update_unit_status(
			group_index,
			unit_index,
			new_status,
			goal=goal or None,
			developer_note=developer_note or None,
		))

	@mcp.prompt(name="task-planning-guide")
	def task_planning_guide() -> str:
		"""A guide for planning development tasks as minimal groups and units before using the plan tool."""
		return PLANNING_GUIDE

	@mcp.prompt(name="status-update-rules")
	def status_update_rules() -> str:
		"""When each status change is appropriate for a unit."""
		return STATUS_UPDATE_RULES

