"""Shared test fixtures and helpers for micromanage tests."""

from pathlib import Path
from typing import Callable

from micromanage.config import Config
from micromanage.plans.models import GroupSpec, PlanSpec, UnitSpec
from micromanage.plans.store import SnapshotStore
from micromanage.plans.workplan import WorkPlan


def make_config(tmp_path: Path) -> Config:
	"""Config with every directory under tmp_path."""
	config = Config(
		config_dir=tmp_path / "config",
		data_dir=tmp_path / "data",
		workplan_dir=tmp_path / "workplan",
	)
	config.ensure_dirs()
	return config


def make_workplan(path: Path, initialize: bool = True) -> WorkPlan:
	"""WorkPlan backed by a snapshot file at `path`."""
	workplan = WorkPlan(SnapshotStore(path))
	if initialize:
		assert workplan.initialize()
	return workplan


def make_plan_spec(
	goal: str = "Add user authentication",
	units_per_group: tuple[int, ...] = (2, 1),
) -> PlanSpec:
	"""Create a PlanSpec with realistic content for testing."""
	return PlanSpec(
		goal=goal,
		groups=[
			GroupSpec(
				goal=f"Group {g}: auth slice",
				developer_note=f"Notes for group {g}",
				units=[
					UnitSpec(goal=f"Unit {g}.{u}", developer_note=f"How to do {g}.{u}")
					for u in range(count)
				],
			)
			for g, count in enumerate(units_per_group)
		],
	)


def capture_tools(config: Config, workplan: WorkPlan, register_fn: Callable) -> tuple[dict, dict]:
	"""Register tools on a mock MCP and return the captured tools and prompts.

	Args:
		config: Config to pass to the registration function
		workplan: WorkPlan the tools operate on
		register_fn: The registration function (e.g., register_plan_tools)

	Returns:
		(tools, prompts): dicts mapping tool name / prompt name to the function
	"""
	tools = {}
	prompts = {}

	class MockMCP:
		def tool(self):
			def decorator(fn):
				tools[fn.__name__] = fn
				return fn
			return decorator

		def prompt(self, name=None):
			def decorator(fn):
				prompts[name or fn.__name__] = fn
				return fn
			return decorator

	register_fn(MockMCP(), config, workplan)
	return tools, prompts
