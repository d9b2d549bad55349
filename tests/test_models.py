"""Tests for plan models and plan input schemas."""

import json

import pytest
from pydantic import ValidationError

from micromanage.plans.models import (
	EMPTY_PLAN,
	SCHEMA_VERSION,
	Group,
	GroupSpec,
	Plan,
	PlanSpec,
	Snapshot,
	Unit,
	UnitSpec,
)
from micromanage.plans.status import Status

from tests.helpers import make_plan_spec


def test_build_starts_everything_not_started():
	plan = PlanSpec(
		goal="Add login",
		groups=[GroupSpec(goal="Backend", units=[UnitSpec(goal="Add endpoint")])],
	).build()
	assert len(plan.groups) == 1
	assert plan.unit_count == 1
	assert plan.groups[0].status == Status.NOT_STARTED
	assert plan.groups[0].units[0].status == Status.NOT_STARTED
	assert plan.groups[0].units[0].goal == "Add endpoint"


def test_build_keeps_order_and_notes():
	plan = make_plan_spec(units_per_group=(2, 3)).build()
	assert [g.goal for g in plan.groups] == ["Group 0: auth slice", "Group 1: auth slice"]
	assert [u.goal for u in plan.groups[1].units] == ["Unit 1.0", "Unit 1.1", "Unit 1.2"]
	assert plan.groups[0].developer_note == "Notes for group 0"
	assert plan.groups[1].units[2].developer_note == "How to do 1.2"


def test_plan_spec_rejects_long_goal():
	with pytest.raises(ValidationError):
		UnitSpec(goal="x" * 61)
	UnitSpec(goal="x" * 60)


def test_plan_spec_rejects_long_note():
	with pytest.raises(ValidationError):
		UnitSpec(goal="ok", developer_note="n" * 301)
	UnitSpec(goal="ok", developer_note="n" * 300)


@pytest.mark.parametrize("goal", ["", " ", "   \t"])
def test_plan_spec_rejects_blank_goals(goal):
	with pytest.raises(ValidationError):
		PlanSpec(goal=goal, groups=[GroupSpec(goal="Backend", units=[UnitSpec(goal="a")])])
	with pytest.raises(ValidationError):
		GroupSpec(goal=goal, units=[UnitSpec(goal="a")])
	with pytest.raises(ValidationError):
		UnitSpec(goal=goal)


def test_plan_spec_strips_surrounding_whitespace():
	unit = UnitSpec(goal="  Add endpoint  ", developer_note=" use FastAPI ")
	assert unit.goal == "Add endpoint"
	assert unit.developer_note == "use FastAPI"
	# Length is measured after stripping
	assert UnitSpec(goal=" " + "x" * 60 + " ").goal == "x" * 60


def test_plan_spec_requires_groups_and_units():
	with pytest.raises(ValidationError):
		PlanSpec(goal="Empty", groups=[])
	with pytest.raises(ValidationError):
		GroupSpec(goal="No units", units=[])


def test_specs_accept_camel_case_input():
	spec = GroupSpec.model_validate({
		"goal": "Backend",
		"developerNote": "group note",
		"units": [{"goal": "Add endpoint", "developerNote": "unit note"}],
	})
	assert spec.developer_note == "group note"
	assert spec.units[0].developer_note == "unit note"


def test_plan_progress():
	plan = Plan(
		goal="Ship it",
		groups=[
			Group(
				goal="One",
				status=Status.COMPLETED,
				units=[Unit(goal="a", status=Status.COMPLETED)],
			),
			Group(
				goal="Two",
				units=[Unit(goal="b", status=Status.IN_PROGRESS), Unit(goal="c")],
			),
		],
	)
	assert plan.get_progress() == {
		"total_groups": 2,
		"completed_groups": 1,
		"total_units": 3,
		"completed_units": 1,
		"percent_complete": 33,
	}
	assert plan.in_progress_units() == [(1, 0)]
	assert [(g, u) for g, u, _ in plan.iter_units()] == [(0, 0), (1, 0), (1, 1)]


def test_plan_to_markdown():
	plan = make_plan_spec(goal="Add login", units_per_group=(1,)).build()
	plan.groups[0].units[0].status = Status.COMPLETED
	md = plan.to_markdown()
	assert md.startswith("# Add login")
	assert "1/1 units (100%)" in md
	assert "- [x] 0. Unit 0.0" in md
	assert "note: How to do 0.0" in md


def test_empty_snapshot_defaults():
	snapshot = Snapshot()
	assert snapshot.plan == EMPTY_PLAN
	assert snapshot.active_plan is None
	assert snapshot.schema_version == SCHEMA_VERSION
	assert snapshot.last_updated


def test_snapshot_json_is_camel_case():
	plan = make_plan_spec(units_per_group=(1,)).build()
	plan.groups[0].units[0].unit_id = "u-1"
	data = json.loads(Snapshot(plan=plan).to_json())

	assert set(data) == {"plan", "lastUpdated", "schemaVersion"}
	unit = data["plan"]["groups"][0]["units"][0]
	assert unit["developerNote"] == "How to do 0.0"
	assert unit["unitId"] == "u-1"
	assert unit["status"] == "not_started"
	# Unset optional fields are omitted
	assert "needsRevision" not in unit


def test_empty_snapshot_json_uses_marker():
	data = json.loads(Snapshot().to_json())
	assert data["plan"] == "empty"
	assert Snapshot.model_validate(data).active_plan is None


def test_snapshot_rejects_unknown_plan_marker():
	with pytest.raises(ValidationError):
		Snapshot.model_validate({"plan": "nothing"})
