"""Starlette app with route assembly."""

from __future__ import annotations

from pathlib import Path

from starlette.applications import Starlette
from starlette.routing import Route

from ..plans.store import SnapshotStore
from .api import api_progress, api_workplan, index


def build_app(workplan_path: str | Path) -> Starlette:
	"""Build and return the Starlette ASGI app for a snapshot file."""
	routes = [
		Route("/", index),
		Route("/api/workplan", api_workplan),
		Route("/api/progress", api_progress),
	]

	app = Starlette(routes=routes)
	app.state.store = SnapshotStore(workplan_path)
	return app
