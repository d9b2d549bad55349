"""Shared utilities for visualizer views."""

from datetime import datetime

from ..plans.status import Status

STATUS_ICONS = {
	Status.NOT_STARTED: "[dim]\\[ ][/dim]",
	Status.NEEDS_REFINEMENT: "[magenta]\\[?][/magenta]",
	Status.IN_PROGRESS: "[yellow]\\[~][/yellow]",
	Status.USER_REVIEW: "[cyan]\\[r][/cyan]",
	Status.COMPLETED: "[green]\\[x][/green]",
	Status.CANCELLED: "[dim]\\[-][/dim]",
}


def status_icon(status: Status) -> str:
	"""Rich markup icon for a status."""
	return STATUS_ICONS.get(status, "\\[ ]")


def format_timestamp(iso_str: str) -> str:
	"""Format an ISO timestamp as relative time (e.g. '2m ago') or absolute."""
	try:
		dt = datetime.fromisoformat(iso_str)
		now = datetime.now(dt.tzinfo) if dt.tzinfo else datetime.now()
		total_secs = int((now - dt).total_seconds())

		if total_secs < 0:
			return iso_str[:19]
		if total_secs < 60:
			return f"{total_secs}s ago"
		if total_secs < 3600:
			return f"{total_secs // 60}m ago"
		if total_secs < 86400:
			return f"{total_secs // 3600}h ago"
		days = total_secs // 86400
		return f"{days}d ago"
	except (ValueError, TypeError):
		return str(iso_str)[:19]


def truncate(text: str, max_len: int = 60) -> str:
	"""Shorten text for single-line display."""
	if not text:
		return ""
	text = " ".join(text.split())
	if len(text) <= max_len:
		return text
	return text[:max_len - 3] + "..."
