"""Read-only web dashboard for the work plan snapshot."""

from __future__ import annotations

import webbrowser
from pathlib import Path


def create_app(workplan_path: str | Path) -> object:
	"""Create the Starlette ASGI application."""
	from .app import build_app

	return build_app(workplan_path)


def run_web_dashboard(workplan_path: str | Path, port: int = 8420, open_browser: bool = True) -> None:
	"""Run the web dashboard server."""
	try:
		import uvicorn
	except ImportError:
		raise SystemExit(
			"Web extras not installed. Install with: pip install -e '.[web]'"
		)

	app = create_app(workplan_path)

	if open_browser:
		import threading

		def _open():
			import time
			time.sleep(0.8)
			webbrowser.open(f"http://localhost:{port}")

		threading.Thread(target=_open, daemon=True).start()

	print(f"Dashboard running at http://localhost:{port}")
	print("Press Ctrl+C to stop.")
	uvicorn.run(app, host="127.0.0.1", port=port, log_level="warning")
