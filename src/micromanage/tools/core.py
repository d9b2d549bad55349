"""Core health check tool."""

import json

from mcp.server.fastmcp import FastMCP

from ..config import Config
from ..plans.models import SCHEMA_VERSION
from ..plans.workplan import WorkPlan


def register_core_tools(mcp: FastMCP, config: Config, workplan: WorkPlan) -> None:
	"""Register core tools."""

	@mcp.tool()
	async def health_check() -> str:
		"""
		Check the health of the micromanage server.
		Returns the state of the work plan and its data file.
		"""
		status = {
			"server": "running",
			"workplan_ready": workplan.is_ready,
			"has_plan": workplan.plan is not None,
			"data_file": str(workplan.store.path),
			"data_file_exists": workplan.store.exists(),
			"schema_version": SCHEMA_VERSION,
			"last_updated": workplan.last_updated,
			"config_dir": str(config.config_dir),
			"log_dir": str(config.log_dir),
		}
		return json.dumps(status, indent=2)
