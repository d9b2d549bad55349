"""Errors raised by the work plan aggregate.

Each error carries an `error_type` used as the machine-readable code in tool
responses. Persistence failures are not errors: they downgrade a successful
result to `memory_only`.
"""

from typing import Optional


class WorkPlanError(Exception):
	"""Base class for rejected work plan commands."""
	error_type = "work_plan_error"

	def to_dict(self) -> dict:
		return {
			"error": str(self),
			"error_type": self.error_type,
			"status": "failed",
		}


class NotInitializedError(WorkPlanError):
	"""Raised when the work plan has not finished loading its storage."""
	error_type = "not_initialized"

	def __init__(self, message: str = "WorkPlan is not initialized. Call initialize() first."):
		super().__init__(message)


class NoActivePlanError(WorkPlanError):
	"""Raised when an operation needs a plan but none has been defined."""
	error_type = "no_active_plan"

	def __init__(
		self,
		message: str = "No implementation plan found. Create an implementation plan first using the 'plan' tool.",
	):
		super().__init__(message)


class IndexOutOfRangeError(WorkPlanError):
	"""Raised when a group or unit index is outside the plan."""
	error_type = "index_out_of_range"


class InvalidTransitionError(WorkPlanError):
	"""Raised when a unit status change breaks the workflow rules."""
	error_type = "invalid_transition"

	def __init__(self, message: str, correct_path: Optional[str] = None):
		super().__init__(message)
		self.correct_path = correct_path

	def to_dict(self) -> dict:
		data = super().to_dict()
		if self.correct_path:
			data["correct_path"] = self.correct_path
		return data


class InvalidOperationError(WorkPlanError):
	"""Raised for requests that are well-formed but not allowed, e.g. a status change on a group."""
	error_type = "invalid_operation"


class MissingRequiredFieldError(WorkPlanError):
	"""Raised when a field required by the addressing mode is absent."""
	error_type = "missing_required_field"
