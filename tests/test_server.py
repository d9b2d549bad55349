"""Tests for server startup and tool registration."""

import signal
from pathlib import Path
from unittest.mock import patch

import pytest

from micromanage.server import create_server, install_shutdown_handlers, run

from tests.helpers import make_config

EXPECTED_TOOLS = {"health_check", "plan", "track", "update"}


def test_server_has_tools(tmp_path: Path):
	"""Server should register every tool against one work plan."""
	mcp, workplan = create_server(make_config(tmp_path))
	assert set(mcp._tool_manager._tools.keys()) == EXPECTED_TOOLS
	assert workplan.is_ready


def test_server_registers_prompts(tmp_path: Path):
	mcp, _ = create_server(make_config(tmp_path))
	prompt_names = set(mcp._prompt_manager._prompts.keys())
	assert {"task-planning-guide", "status-update-rules"} <= prompt_names


def test_server_creates_snapshot(tmp_path: Path):
	config = make_config(tmp_path)
	_, workplan = create_server(config)
	assert config.workplan_path.exists()
	assert workplan.store.path == config.workplan_path


def test_servers_do_not_share_state(tmp_path: Path):
	from micromanage.plans.status import Status
	from tests.helpers import make_plan_spec

	_, first = create_server(make_config(tmp_path / "a"))
	_, second = create_server(make_config(tmp_path / "b"))
	first.define_plan(make_plan_spec())
	first.update_unit_status(0, 0, Status.NEEDS_REFINEMENT)
	assert second.plan is None


def test_create_server_fails_when_storage_unusable(tmp_path: Path):
	config = make_config(tmp_path)
	with patch("micromanage.server.WorkPlan.initialize", return_value=False):
		with pytest.raises(RuntimeError, match="Failed to initialize WorkPlan"):
			create_server(config)


def test_shutdown_handler_saves_and_exits(tmp_path: Path):
	_, workplan = create_server(make_config(tmp_path))
	handlers = {}
	with patch("micromanage.server.signal.signal", side_effect=lambda sig, fn: handlers.setdefault(sig, fn)):
		install_shutdown_handlers(workplan)

	assert set(handlers) == {signal.SIGINT, signal.SIGTERM}
	with patch.object(workplan, "force_save", return_value=True) as force_save:
		with pytest.raises(SystemExit) as exc_info:
			handlers[signal.SIGTERM](signal.SIGTERM, None)
	assert exc_info.value.code == 0
	force_save.assert_called_once()


def test_run_saves_on_exit(tmp_path: Path):
	config = make_config(tmp_path)
	with (
		patch("micromanage.server.setup_logging"),
		patch("micromanage.server.install_shutdown_handlers"),
		patch("mcp.server.fastmcp.FastMCP.run") as mcp_run,
		patch("micromanage.server.WorkPlan.force_save") as force_save,
	):
		run(config)
	mcp_run.assert_called_once()
	force_save.assert_called_once()
