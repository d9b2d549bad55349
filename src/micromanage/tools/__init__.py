"""MCP tool registration - modular tool definitions."""

from mcp.server.fastmcp import FastMCP

from ..config import Config
from ..plans.workplan import WorkPlan
from .core import register_core_tools
from .plans import register_plan_tools


def register_all_tools(mcp: FastMCP, config: Config, workplan: WorkPlan) -> None:
	"""Register all MCP tools against a single work plan instance."""
	register_core_tools(mcp, config, workplan)
	register_plan_tools(mcp, config, workplan)
