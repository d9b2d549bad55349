"""micromanage - MCP server that tracks a ticket's work plan as groups of units."""
