"""micromanage MCP server."""

import logging
import signal
import sys
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .config import Config, load_config
from .logging_config import setup_logging
from .plans.store import SnapshotStore
from .plans.workplan import WorkPlan
from .prompts import SERVER_INSTRUCTIONS
from .tools import register_all_tools

logger = logging.getLogger(__name__)


def create_server(config: Optional[Config] = None) -> tuple[FastMCP, WorkPlan]:
	"""
	Build the MCP server and the work plan it serves.

	Raises:
		RuntimeError: If the work plan storage cannot be initialized
	"""
	config = config or load_config()

	workplan = WorkPlan(SnapshotStore(config.workplan_path))
	if not workplan.initialize():
		raise RuntimeError(f"Failed to initialize WorkPlan with data file: {config.workplan_path}")

	mcp = FastMCP("micromanage", instructions=SERVER_INSTRUCTIONS)
	register_all_tools(mcp, config, workplan)
	return mcp, workplan


def install_shutdown_handlers(workplan: WorkPlan) -> None:
	"""Save the work plan before exiting on SIGINT/SIGTERM."""

	def _handle(signum: int, frame: object) -> None:
		logger.info(f"Received {signal.Signals(signum).name}, saving work plan")
		workplan.force_save()
		sys.exit(0)

	for sig in (signal.SIGINT, signal.SIGTERM):
		signal.signal(sig, _handle)


def run(config: Optional[Config] = None) -> None:
	"""Run the MCP server over stdio until the client disconnects."""
	config = config or load_config()
	setup_logging(config.log_level, config.log_dir)

	mcp, workplan = create_server(config)
	install_shutdown_handlers(workplan)
	try:
		mcp.run()
	except Exception:
		logger.exception("Fatal error running server")
		raise
	finally:
		workplan.force_save()
