"""Tests for visualizer Rich views."""

from datetime import datetime, timedelta

from rich.console import Console

from micromanage.plans.models import Snapshot
from micromanage.plans.status import Status
from micromanage.visualizer.plan_progress import render_plan_progress, render_plan_summary
from micromanage.visualizer.utils import STATUS_ICONS, format_timestamp, status_icon, truncate

from tests.helpers import make_plan_spec


def _console() -> Console:
	return Console(record=True, width=120)


# -- utils tests --

def test_format_timestamp_recent():
	ts = (datetime.now() - timedelta(seconds=5)).isoformat()
	assert format_timestamp(ts).endswith("s ago")


def test_format_timestamp_hours():
	ts = (datetime.now() - timedelta(hours=3)).isoformat()
	assert format_timestamp(ts) == "3h ago"


def test_format_timestamp_invalid():
	assert format_timestamp("not-a-date") == "not-a-date"


def test_truncate():
	assert truncate("short") == "short"
	assert truncate("a" * 100, max_len=10) == "aaaaaaa..."
	assert truncate("multi\nline  text") == "multi line text"
	assert truncate("") == ""


def test_every_status_has_icon():
	assert set(STATUS_ICONS) == set(Status)


def test_icons_render_literally():
	console = _console()
	for status in Status:
		console.print(status_icon(status))
	text = console.export_text()
	for icon in ("[ ]", "[?]", "[~]", "[r]", "[x]", "[-]"):
		assert icon in text


# -- plan progress tests --

def test_render_plan_progress():
	plan = make_plan_spec(goal="Add login").build()
	plan.groups[0].units[0].status = Status.COMPLETED
	console = _console()

	render_plan_progress(plan, console=console)

	text = console.export_text()
	assert "Add login" in text
	assert "1/3 units" in text
	assert "[x] 0. Unit 0.0" in text
	assert "How to do 0.1" in text


def test_render_plan_progress_without_notes():
	plan = make_plan_spec().build()
	console = _console()
	render_plan_progress(plan, console=console, notes=False)
	assert "How to do" not in console.export_text()


def test_render_plan_progress_keeps_brackets_in_goals():
	plan = make_plan_spec(goal="Fix [bold] parsing").build()
	console = _console()
	render_plan_progress(plan, console=console)
	assert "Fix [bold] parsing" in console.export_text()


def test_render_summary_empty():
	console = _console()
	render_plan_summary(Snapshot(), console=console)
	assert "No active plan." in console.export_text()


def test_render_summary_with_active_unit():
	plan = make_plan_spec(goal="Add login").build()
	plan.groups[1].units[0].status = Status.IN_PROGRESS
	console = _console()

	render_plan_summary(Snapshot(plan=plan), console=console)

	text = console.export_text()
	assert "Goal: Add login" in text
	assert "group 1, unit 0: Unit 1.0" in text
	assert "Schema: 2.0.0" in text
