"""Rich views for work plan progress."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from ..plans.models import Plan, Snapshot
from .utils import format_timestamp, status_icon, truncate


def render_plan_progress(plan: Plan, console: Optional[Console] = None, notes: bool = True) -> None:
	"""Render a plan as a Rich Tree with groups and units."""
	console = console or Console()

	progress = plan.get_progress()
	tree = Tree(
		f"[bold]{escape(plan.goal)}[/bold]  "
		f"[dim]({progress['completed_units']}/{progress['total_units']} units, "
		f"{progress['percent_complete']}%)[/dim]"
	)

	for group_index, group in enumerate(plan.groups):
		label = f"{status_icon(group.status)} [bold]{group_index}. {escape(group.goal)}[/bold]"
		if notes and group.developer_note:
			label += f" [dim]- {escape(truncate(group.developer_note))}[/dim]"
		branch = tree.add(label)

		for unit_index, unit in enumerate(group.units):
			unit_label = f"{status_icon(unit.status)} {unit_index}. {escape(unit.goal)}"
			if notes and unit.developer_note:
				unit_label += f" [dim]- {escape(truncate(unit.developer_note))}[/dim]"
			branch.add(unit_label)

	console.print(tree)


def render_plan_summary(snapshot: Snapshot, console: Optional[Console] = None) -> None:
	"""Render a summary panel for a snapshot."""
	console = console or Console()

	plan = snapshot.active_plan
	if plan is None:
		console.print(Panel("[dim]No active plan.[/dim]", title="Work plan", border_style="cyan"))
		return

	progress = plan.get_progress()
	in_progress = plan.in_progress_units()

	lines = []
	lines.append(f"[bold]Goal:[/bold] {escape(plan.goal)}")
	lines.append(
		f"[bold]Progress:[/bold] {progress['completed_units']}/{progress['total_units']} units "
		f"({progress['percent_complete']}%)"
	)
	lines.append(
		f"[bold]Groups:[/bold] {progress['completed_groups']}/{progress['total_groups']} complete"
	)
	if in_progress:
		g, u = in_progress[0]
		lines.append(f"[bold]Active:[/bold] group {g}, unit {u}: {escape(plan.groups[g].units[u].goal)}")
	else:
		lines.append("[bold]Active:[/bold] none")
	if plan.needs_more_thoughts:
		lines.append("[yellow]Plan is flagged as needing more thought.[/yellow]")
	lines.append("")
	lines.append(f"[bold]Last updated:[/bold] {format_timestamp(snapshot.last_updated)}")
	lines.append(f"[bold]Schema:[/bold] {snapshot.schema_version}")

	console.print(Panel("\n".join(lines), title="Work plan", border_style="cyan"))
