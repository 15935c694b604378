"""Planner error taxonomy."""


class PlannerError(Exception):
    """Base class for all planner errors."""

    pass


class InvalidInput(PlannerError):
    """Raised when a request carries invalid data (e.g. an empty title)."""

    pass


class UnknownTask(PlannerError):
    """Raised when a task id is not present in memory."""

    def __init__(self, task_id: str):
        super().__init__(f"Unknown task: {task_id!r}")
        self.task_id = task_id


class UnknownSlot(PlannerError):
    """Raised when a pill slot index is out of range."""

    def __init__(self, slot_index: int):
        super().__init__(f"Unknown slot index: {slot_index}")
        self.slot_index = slot_index


class InvalidSlot(PlannerError):
    """Raised when a slot label or drop zone names no known slot."""

    pass


class MalformedEvent(PlannerError):
    """Raised when a drop event payload cannot be decoded."""

    pass


class PersistenceFailure(PlannerError):
    """Raised when a durable write or read did not complete."""

    pass
