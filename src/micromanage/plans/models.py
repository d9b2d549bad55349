"""
Plan Models - Pydantic schemas for the work plan and its snapshot.

A plan is a goal broken into ordered groups (one reviewable slice of work each),
and each group into ordered units (one atomic change each). Groups and units are
addressed by position, so list order is meaningful.

Field names are snake_case in Python and camelCase on disk.
"""

from datetime import datetime
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .status import Status

SCHEMA_VERSION = "2.0.0"
EMPTY_PLAN = "empty"

GOAL_MAX_LENGTH = 60
NOTE_MAX_LENGTH = 300


class _CamelModel(BaseModel):
	model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class _InputModel(_CamelModel):
	model_config = ConfigDict(str_strip_whitespace=True)


class Unit(_CamelModel):
	"""A single atomic piece of work within a group."""
	goal: str = Field(description="What this unit delivers")
	status: Status = Field(default=Status.NOT_STARTED)
	developer_note: Optional[str] = Field(default=None, description="Implementation notes")

	# Revision linkage
	unit_id: Optional[str] = Field(default=None)
	needs_more_thoughts: Optional[bool] = Field(default=None)
	needs_revision: Optional[bool] = Field(default=None)
	revises_target_unit: Optional[str] = Field(default=None, description="unit_id this unit revises")


class Group(_CamelModel):
	"""An ordered collection of units forming one deliverable slice."""
	goal: str = Field(description="What this group delivers")
	status: Status = Field(default=Status.NOT_STARTED)
	units: list[Unit] = Field(min_length=1)
	developer_note: Optional[str] = Field(default=None)
	needs_more_thoughts: Optional[bool] = Field(default=None)


class Plan(_CamelModel):
	"""The active work plan."""
	goal: str = Field(description="What the whole plan achieves")
	groups: list[Group] = Field(min_length=1)
	needs_more_thoughts: Optional[bool] = Field(default=None)

	@property
	def unit_count(self) -> int:
		return sum(len(g.units) for g in self.groups)

	def iter_units(self):
		"""Yield (group_index, unit_index, unit) for every unit in plan order."""
		for group_index, group in enumerate(self.groups):
			for unit_index, unit in enumerate(group.units):
				yield group_index, unit_index, unit

	def in_progress_units(self) -> list[tuple[int, int]]:
		"""Addresses of every unit currently in progress."""
		return [(g, u) for g, u, unit in self.iter_units() if unit.status == Status.IN_PROGRESS]

	def get_progress(self) -> dict:
		"""Calculate overall progress."""
		completed_units = sum(1 for _, _, u in self.iter_units() if u.status == Status.COMPLETED)
		completed_groups = sum(1 for g in self.groups if g.status == Status.COMPLETED)
		total_units = self.unit_count

		return {
			"total_groups": len(self.groups),
			"completed_groups": completed_groups,
			"total_units": total_units,
			"completed_units": completed_units,
			"percent_complete": round(completed_units / total_units * 100) if total_units else 0,
		}

	def to_markdown(self) -> str:
		"""Convert plan to markdown format."""
		icons = {
			Status.NOT_STARTED: "[ ]",
			Status.NEEDS_REFINEMENT: "[?]",
			Status.IN_PROGRESS: "[~]",
			Status.USER_REVIEW: "[r]",
			Status.COMPLETED: "[x]",
			Status.CANCELLED: "[-]",
		}
		progress = self.get_progress()
		lines = [
			f"# {self.goal}",
			"",
			f"**Progress:** {progress['completed_units']}/{progress['total_units']} units "
			f"({progress['percent_complete']}%)",
			"",
		]
		for index, group in enumerate(self.groups):
			lines.append(f"## {index}. {icons[group.status]} {group.goal}")
			if group.developer_note:
				lines.append(f"_{group.developer_note}_")
			lines.append("")
			for unit_index, unit in enumerate(group.units):
				lines.append(f"- {icons[unit.status]} {unit_index}. {unit.goal}")
				if unit.developer_note:
					lines.append(f"  - note: {unit.developer_note}")
			lines.append("")
		return "\n".join(lines)


class Snapshot(_CamelModel):
	"""The persisted form of the work plan."""
	plan: Union[Plan, Literal["empty"]] = Field(default=EMPTY_PLAN)
	last_updated: str = Field(default_factory=lambda: datetime.now().isoformat())
	schema_version: str = Field(default=SCHEMA_VERSION)

	@property
	def active_plan(self) -> Optional[Plan]:
		return self.plan if isinstance(self.plan, Plan) else None

	def to_json(self) -> str:
		return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


# Input schemas for defining a plan

class UnitSpec(_InputModel):
	"""A unit to create."""
	goal: str = Field(
		min_length=1,
		max_length=GOAL_MAX_LENGTH,
		description="What this unit accomplishes, phrased like a commit message.",
	)
	developer_note: Optional[str] = Field(
		default=None,
		max_length=NOTE_MAX_LENGTH,
		description="Implementation details (HOW) discovered during refinement.",
	)


class GroupSpec(_InputModel):
	"""A group to create, with at least one unit."""
	goal: str = Field(
		min_length=1,
		max_length=GOAL_MAX_LENGTH,
		description="What this group delivers, phrased like a PR title.",
	)
	units: list[UnitSpec] = Field(min_length=1, description="Small, atomic units of work.")
	developer_note: Optional[str] = Field(default=None, max_length=NOTE_MAX_LENGTH)


class PlanSpec(_InputModel):
	"""A complete plan definition."""
	goal: str = Field(min_length=1, max_length=GOAL_MAX_LENGTH)
	groups: list[GroupSpec] = Field(min_length=1)
	needs_more_thoughts: Optional[bool] = Field(default=None)

	def build(self) -> Plan:
		"""Create a fresh Plan with every group and unit not started."""
		return Plan(
			goal=self.goal,
			needs_more_thoughts=self.needs_more_thoughts,
			groups=[
				Group(
					goal=g.goal,
					developer_note=g.developer_note,
					units=[Unit(goal=u.goal, developer_note=u.developer_note) for u in g.units],
				)
				for g in self.groups
			],
		)
