"""CLI for micromanage: setup, serve, doctor, and viz commands."""

import argparse
import dataclasses
import json
import os
import platform
import sys
import tempfile
from pathlib import Path

from importlib.metadata import PackageNotFoundError, version as pkg_version

from .config import Config, load_config
from .plans.models import SCHEMA_VERSION, Snapshot
from .plans.store import SnapshotStore

SERVER_NAME = "micromanage"


def _detect_claude_code_config() -> Path:
	"""Detect Claude Code MCP settings file."""
	home = Path.home()
	candidates = [
		home / ".claude" / "claude_code_config.json",
		home / ".claude.json",
	]
	for path in candidates:
		if path.exists():
			return path
	# Default location even if it doesn't exist yet
	return home / ".claude" / "claude_code_config.json"


def _detect_claude_desktop_config() -> Path | None:
	"""Detect Claude Desktop MCP settings file."""
	system = platform.system()
	home = Path.home()
	if system == "Darwin":
		path = home / "Library" / "Application Support" / "Claude" / "claude_desktop_config.json"
	elif system == "Linux":
		path = home / ".config" / "Claude" / "claude_desktop_config.json"
	elif system == "Windows":
		appdata = os.getenv("APPDATA", "")
		if appdata:
			path = Path(appdata) / "Claude" / "claude_desktop_config.json"
		else:
			return None
	else:
		return None
	return path if path.exists() else None


MCP_ENTRY = {
	"type": "stdio",
	"command": "micromanage",
	"args": ["serve"],
}


def _inject_mcp_config(config_path: Path) -> bool:
	"""Inject the micromanage entry into an MCP config file."""
	try:
		if config_path.exists():
			with open(config_path) as f:
				data = json.load(f)
		else:
			data = {}

		if "mcpServers" not in data:
			data["mcpServers"] = {}

		if SERVER_NAME in data["mcpServers"]:
			print(f"  Already configured in {config_path}")
			return True

		data["mcpServers"][SERVER_NAME] = MCP_ENTRY
		config_path.parent.mkdir(parents=True, exist_ok=True)
		with open(config_path, "w") as f:
			json.dump(data, f, indent=2)
		print(f"  Added to {config_path}")
		return True
	except (json.JSONDecodeError, IOError) as e:
		print(f"  Failed to update {config_path}: {e}")
		return False


def _confirm(question: str, assume_yes: bool) -> bool:
	if assume_yes:
		return True
	response = input(f"  {question} [Y/n] ").strip().lower()
	return response in ("", "y", "yes")


def cmd_setup(args: argparse.Namespace) -> None:
	"""Setup wizard: config file and MCP client registration."""
	if getattr(args, "check", False):
		cmd_setup_check()
		return

	assume_yes = getattr(args, "yes", False)

	print("micromanage setup")
	print(f"{'=' * 40}")
	print()

	config = load_config()
	print("[1/3] Directories")
	print(f"  Config:   {config.config_dir}")
	print(f"  Logs:     {config.log_dir}")
	print(f"  Workplan: {config.workplan_path}")
	print()

	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		toml_path.write_text(
			'# micromanage configuration\n'
			'\n'
			f'# workplan_dir = "{config.workplan_dir}"\n'
			f'# workplan_file_name = "{config.workplan_file_name}"\n'
			'# log_level = "INFO"\n'
		)
		print(f"[2/3] Config file created: {toml_path}")
	else:
		print(f"[2/3] Config file exists: {toml_path}")
	print()

	print("[3/3] MCP configuration")
	claude_code = _detect_claude_code_config()
	print(f"  Claude Code config: {claude_code}")
	if _confirm("Add micromanage to Claude Code?", assume_yes):
		_inject_mcp_config(claude_code)

	claude_desktop = _detect_claude_desktop_config()
	if claude_desktop:
		print(f"  Claude Desktop config: {claude_desktop}")
		if _confirm("Add micromanage to Claude Desktop?", assume_yes):
			_inject_mcp_config(claude_desktop)
	else:
		print("  Claude Desktop config: not detected")
	print()
	print("  Restart your MCP client to load the server.")


def cmd_setup_check() -> None:
	"""Check current configuration status."""
	print("micromanage config check")
	print(f"{'=' * 40}")
	print()

	config = load_config()

	checks = [
		("Config dir", config.config_dir, config.config_dir.exists()),
		("Log dir", config.log_dir, config.log_dir.exists()),
		("Config file", config.config_dir / "config.toml", (config.config_dir / "config.toml").exists()),
		("Workplan file", config.workplan_path, config.workplan_path.exists()),
	]

	all_ok = True
	for label, path, exists in checks:
		status = "OK" if exists else "MISSING"
		if not exists:
			all_ok = False
		print(f"  [{status:7s}] {label}: {path}")

	print()
	if not all_ok:
		print("  Some paths are missing. Run 'micromanage setup' or 'micromanage serve' to create them.")
	else:
		print("  All paths configured.")


def cmd_serve(args: argparse.Namespace) -> None:
	"""Run the MCP server (stdio transport)."""
	from .server import run
	run(load_config())


def _check_config_toml(config_dir: Path) -> tuple[str, str | None]:
	"""Validate config.toml. Returns (status, issue_or_none)."""
	import tomllib

	toml_path = config_dir / "config.toml"
	if not toml_path.exists():
		return "not found (optional)", None
	try:
		with open(toml_path, "rb") as f:
			tomllib.load(f)
		return "valid", None
	except tomllib.TOMLDecodeError as e:
		msg = f"config.toml parse error: {e}"
		return f"INVALID ({e})", msg


def _check_workplan_file(path: Path) -> tuple[str, str | None]:
	"""Validate the snapshot file. Returns (status, issue_or_none)."""
	if not path.exists():
		return "not found (created on first serve)", None
	try:
		with open(path, encoding="utf-8") as f:
			data = json.load(f)
	except (json.JSONDecodeError, IOError) as e:
		return f"INVALID ({e})", f"workplan file unreadable: {e}"
	if not isinstance(data, dict):
		return "INVALID (not a JSON object)", "workplan file is not a JSON object"

	version = data.get("schemaVersion") or data.get("version")
	snapshot = SnapshotStore(path).load(Snapshot())
	plan = snapshot.active_plan
	status = f"schema {version}"
	status += f", plan: {plan.goal}" if plan else ", no active plan"
	issue = None
	if version != SCHEMA_VERSION:
		issue = f"workplan file uses schema {version}, current is {SCHEMA_VERSION} (rewritten on next save)"
	return status, issue


def _check_server_startup(config: Config) -> tuple[str, str | None]:
	"""Try building the server and counting registered tools. Returns (status, issue_or_none).

	The server is built against a throwaway snapshot so the check never writes
	to the configured workplan location.
	"""
	try:
		from .server import create_server
		with tempfile.TemporaryDirectory(prefix="micromanage-doctor-") as scratch:
			server_instance, _ = create_server(dataclasses.replace(config, workplan_dir=Path(scratch)))
		tools = server_instance._tool_manager._tools
		return f"OK ({len(tools)} tools registered)", None
	except Exception as e:
		return f"FAILED ({e})", f"Server startup failed: {e}"


def cmd_doctor(args: argparse.Namespace) -> None:
	"""Health check - verify installation and configuration."""
	print("micromanage doctor")
	print(f"{'=' * 40}")

	config = load_config()
	issues: list[str] = []

	py_ver = f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}"
	print(f"  Python:       {py_ver}")
	print(f"  Platform:     {platform.system()} {platform.machine()}")
	print()

	print("  Core deps:")
	for dep in ["mcp", "pydantic", "platformdirs", "rich"]:
		try:
			print(f"    {dep:22s} {pkg_version(dep)}")
		except PackageNotFoundError:
			print(f"    {dep:22s} NOT INSTALLED")
			issues.append(f"{dep} package not installed")

	print("  Web extra:")
	for dep in ["starlette", "uvicorn"]:
		try:
			print(f"    {dep:22s} {pkg_version(dep)}")
		except PackageNotFoundError:
			print(f"    {dep:22s} not installed (pip install micromanage[web])")
	print()

	print("  Config:")
	toml_status, toml_issue = _check_config_toml(config.config_dir)
	print(f"    config.toml:         {toml_status}")
	if toml_issue:
		issues.append(toml_issue)

	workplan_status, workplan_issue = _check_workplan_file(config.workplan_path)
	print(f"    workplan:            {config.workplan_path}")
	print(f"                         {workplan_status}")
	if workplan_issue:
		issues.append(workplan_issue)
	print()

	print("  Server:")
	server_status, server_issue = _check_server_startup(config)
	print(f"    {server_status}")
	if server_issue:
		issues.append(server_issue)
	print()

	if issues:
		print(f"  {len(issues)} issue(s) found:")
		for issue in issues:
			print(f"    - {issue}")
		sys.exit(1)
	else:
		print("  All checks passed.")


def cmd_viz(args: argparse.Namespace) -> None:
	"""Visualizer subcommand - Rich terminal views of the work plan."""
	viz_target = getattr(args, "viz_target", None)

	if viz_target == "web":
		cmd_viz_web(args)
		return

	if viz_target != "plan":
		print("Usage: micromanage viz {plan|web}")
		print("Run 'micromanage viz --help' for details.")
		sys.exit(1)

	from .visualizer.plan_progress import render_plan_progress, render_plan_summary

	config = load_config()
	snapshot = SnapshotStore(config.workplan_path).load(Snapshot())

	if getattr(args, "summary", False):
		render_plan_summary(snapshot)
		return

	plan = snapshot.active_plan
	if plan is None:
		print(f"No active plan found in {config.workplan_path}.")
		return
	if getattr(args, "markdown", False):
		print(plan.to_markdown())
	else:
		render_plan_progress(plan, notes=not getattr(args, "no_notes", False))


def cmd_viz_web(args: argparse.Namespace) -> None:
	"""Launch the web dashboard."""
	try:
		from .web import run_web_dashboard
	except ImportError:
		print("Web extras not installed.")
		print("Install with: pip install -e '.[web]'")
		sys.exit(1)

	config = load_config()
	port = getattr(args, "port", 8420)
	no_open = getattr(args, "no_open", False)
	run_web_dashboard(config.workplan_path, port=port, open_browser=not no_open)


def main() -> None:
	"""CLI entry point."""
	parser = argparse.ArgumentParser(
		prog="micromanage",
		description="MCP server that tracks a ticket's work plan and enforces its task workflow",
	)
	try:
		parser.add_argument("--version", action="version", version=pkg_version("micromanage"))
	except PackageNotFoundError:
		pass  # running from a source checkout
	subparsers = parser.add_subparsers(dest="command")

	# setup
	setup_parser = subparsers.add_parser("setup", help="Setup wizard")
	setup_parser.add_argument("--check", action="store_true", help="Check current config")
	setup_parser.add_argument("--yes", "-y", action="store_true", help="Answer yes to all prompts")
	setup_parser.set_defaults(func=cmd_setup)

	# serve
	serve_parser = subparsers.add_parser("serve", help="Run MCP server (stdio)")
	serve_parser.set_defaults(func=cmd_serve)

	# doctor
	doctor_parser = subparsers.add_parser("doctor", help="Health check")
	doctor_parser.set_defaults(func=cmd_doctor)

	# viz
	viz_parser = subparsers.add_parser("viz", help="Visualize the work plan")
	viz_subparsers = viz_parser.add_subparsers(dest="viz_target")

	viz_plan = viz_subparsers.add_parser("plan", help="Plan progress tree")
	viz_plan.add_argument("--summary", action="store_true", help="Show summary panel instead of tree")
	viz_plan.add_argument("--markdown", action="store_true", help="Print the plan as markdown")
	viz_plan.add_argument("--no-notes", action="store_true", help="Hide developer notes")
	viz_plan.set_defaults(func=cmd_viz)

	viz_web = viz_subparsers.add_parser("web", help="Launch web dashboard")
	viz_web.add_argument("--port", type=int, default=8420, help="Server port (default: 8420)")
	viz_web.add_argument("--no-open", action="store_true", help="Don't auto-open browser")
	viz_web.set_defaults(func=cmd_viz)

	viz_parser.set_defaults(func=cmd_viz)

	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	args.func(args)


if __name__ == "__main__":
	main()
