"""
Snapshot Store - JSON file persistence for the work plan.

Features:
- Whole-snapshot overwrite via temp file + os.replace (never a half-written file)
- Falls back to a default snapshot when the file is missing or unreadable
- Schema version check with an explicit migration for legacy snapshots
"""

import contextlib
import json
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError

from .models import EMPTY_PLAN, SCHEMA_VERSION, Snapshot

logger = logging.getLogger(__name__)

LEGACY_SCHEMA_VERSION = "1.0.0"
LEGACY_EMPTY_MARKER = "noTicket"
DEFAULT_FILE_MODE = 0o644


@dataclass(frozen=True)
class SaveResult:
	"""Outcome of a save attempt."""
	ok: bool
	error: Optional[str] = None


class SnapshotStore:
	"""
	Single-file snapshot storage.

	Usage:
		store = SnapshotStore(".micromanage/workplan.json")
		snapshot = store.load(Snapshot())

		result = store.save(snapshot)
		if not result.ok:
			...  # state is still valid in memory
	"""

	def __init__(self, path: str | Path):
		self._path = Path(path)

	@property
	def path(self) -> Path:
		"""Location of the snapshot file."""
		return self._path

	def exists(self) -> bool:
		"""Whether the snapshot file exists."""
		return self._path.is_file()

	def save(self, snapshot: Snapshot) -> SaveResult:
		"""
		Durably overwrite the snapshot file.

		Returns:
			SaveResult with ok=False and the error text if the write failed
		"""
		try:
			self._path.parent.mkdir(parents=True, exist_ok=True)
			fd, tmp_path = tempfile.mkstemp(
				dir=self._path.parent,
				prefix=f".{self._path.name}.",
				suffix=".tmp",
			)
			try:
				with os.fdopen(fd, "w", encoding="utf-8") as f:
					f.write(snapshot.to_json())
					f.flush()
					os.fsync(f.fileno())
				os.chmod(tmp_path, self._file_mode())
				os.replace(tmp_path, self._path)
			except BaseException:
				with contextlib.suppress(OSError):
					os.unlink(tmp_path)
				raise
		except (OSError, ValueError) as e:
			logger.error(f"Failed to save snapshot to {self._path}: {e}")
			return SaveResult(ok=False, error=str(e))

		logger.debug(f"Snapshot saved to {self._path}")
		return SaveResult(ok=True)

	def _file_mode(self) -> int:
		# mkstemp creates 0600; match the file being replaced, or 0644 for a new one
		if self._path.exists():
			return stat.S_IMODE(self._path.stat().st_mode)
		return DEFAULT_FILE_MODE

	def load(self, default: Snapshot) -> Snapshot:
		"""
		Load the snapshot, or return `default` if it is missing or corrupt.

		A schema version other than the current one is logged and read
		best-effort. Legacy snapshots are migrated first.
		"""
		if not self.exists():
			logger.info(f"Snapshot not found at {self._path}, using defaults")
			return default

		try:
			raw = json.loads(self._path.read_text(encoding="utf-8"))
		except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
			logger.error(f"Failed to read snapshot from {self._path}: {e}")
			return default

		if not isinstance(raw, dict):
			logger.error(f"Snapshot at {self._path} is not a JSON object, using defaults")
			return default

		if is_legacy_snapshot(raw):
			logger.warning(
				f"Migrating snapshot at {self._path} from schema {LEGACY_SCHEMA_VERSION} to {SCHEMA_VERSION}"
			)
			raw = migrate_legacy_snapshot(raw)

		stored_version = raw.get("schemaVersion")
		if stored_version != SCHEMA_VERSION:
			logger.warning(f"Data version mismatch: file={stored_version}, current={SCHEMA_VERSION}")

		try:
			snapshot = Snapshot.model_validate(raw)
		except ValidationError as e:
			logger.error(f"Snapshot at {self._path} does not match the schema, using defaults: {e}")
			return default

		logger.info(f"Snapshot loaded from {self._path}")
		return snapshot


def is_legacy_snapshot(raw: dict[str, Any]) -> bool:
	"""Legacy snapshots keep the plan under `currentTicket`."""
	return "currentTicket" in raw and "plan" not in raw


def migrate_legacy_snapshot(raw: dict[str, Any]) -> dict[str, Any]:
	"""
	Convert a legacy snapshot to the current layout.

	Legacy layout: {currentTicket: {goal, pullRequests: [{goal, status, commits: [...]}]}
	or "noTicket", lastUpdated, version}.
	"""
	ticket = raw.get("currentTicket", LEGACY_EMPTY_MARKER)

	if isinstance(ticket, dict):
		plan: Any = {
			"goal": ticket.get("goal"),
			"needsMoreThoughts": ticket.get("needsMoreThoughts"),
			"groups": [_migrate_group(pr) for pr in ticket.get("pullRequests") or []],
		}
	else:
		plan = EMPTY_PLAN

	migrated: dict[str, Any] = {"plan": plan, "schemaVersion": SCHEMA_VERSION}
	if raw.get("lastUpdated"):
		migrated["lastUpdated"] = raw["lastUpdated"]
	return migrated


def _migrate_group(pr: dict[str, Any]) -> dict[str, Any]:
	return {
		"goal": pr.get("goal"),
		"status": pr.get("status", "not_started"),
		"developerNote": pr.get("developerNote"),
		"needsMoreThoughts": pr.get("needsMoreThoughts"),
		"units": [
			{
				"goal": c.get("goal"),
				"status": c.get("status", "not_started"),
				"developerNote": c.get("developerNote"),
				"unitId": c.get("commitId"),
				"needsMoreThoughts": c.get("needsMoreThoughts"),
				"needsRevision": c.get("needsRevision"),
				"revisesTargetUnit": c.get("revisesTargetCommit"),
			}
			for c in pr.get("commits") or []
		],
	}
