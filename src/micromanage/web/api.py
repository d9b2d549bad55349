"""JSON API endpoints for the web dashboard."""

from __future__ import annotations

import asyncio
import json

from starlette.requests import Request
from starlette.responses import HTMLResponse, JSONResponse

from ..plans.models import Snapshot
from ..plans.store import SnapshotStore
from .templates import DASHBOARD_HTML


def get_store(request: Request) -> SnapshotStore:
	"""Get the SnapshotStore from app state."""
	return request.app.state.store


async def _load(request: Request) -> Snapshot:
	store = get_store(request)
	return await asyncio.to_thread(store.load, Snapshot(last_updated=""))


async def index(request: Request) -> HTMLResponse:
	"""Serve the dashboard HTML page."""
	return HTMLResponse(DASHBOARD_HTML)


async def api_workplan(request: Request) -> JSONResponse:
	"""The raw snapshot, exactly as stored on disk."""
	snapshot = await _load(request)
	return JSONResponse(json.loads(snapshot.to_json()))


async def api_progress(request: Request) -> JSONResponse:
	"""Progress counts and the group/unit listing for the dashboard."""
	snapshot = await _load(request)
	plan = snapshot.active_plan
	if plan is None:
		return JSONResponse({"has_plan": False, "last_updated": snapshot.last_updated})

	return JSONResponse({
		"has_plan": True,
		"goal": plan.goal,
		"last_updated": snapshot.last_updated,
		"progress": plan.get_progress(),
		"groups": [
			{
				"group_index": group_index,
				"goal": group.goal,
				"status": group.status.value,
				"developer_note": group.developer_note,
				"units": [
					{
						"unit_index": unit_index,
						"goal": unit.goal,
						"status": unit.status.value,
						"developer_note": unit.developer_note,
					}
					for unit_index, unit in enumerate(group.units)
				],
			}
			for group_index, group in enumerate(plan.groups)
		],
	})
