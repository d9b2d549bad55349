"""Plans module - work plan state machine and snapshot storage."""

from .aggregation import derive_group_status
from .errors import WorkPlanError
from .models import Group, GroupSpec, Plan, PlanSpec, Snapshot, Unit, UnitSpec
from .status import Status, validate_transition
from .store import SnapshotStore
from .workplan import WorkPlan

__all__ = [
	"Plan",
	"Group",
	"Unit",
	"Snapshot",
	"PlanSpec",
	"GroupSpec",
	"UnitSpec",
	"Status",
	"validate_transition",
	"derive_group_status",
	"SnapshotStore",
	"WorkPlan",
	"WorkPlanError",
]
