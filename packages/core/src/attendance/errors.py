"""Exceptions shared by the attendance pipeline and its adapters."""


class RepositoryError(RuntimeError):
    """A persistence call failed for a reason other than "not found"."""


class DuplicateArrivalError(RepositoryError):
    """An arrival already exists for the employee on that calendar day."""


class DuplicateEmployeeError(RepositoryError):
    """Another employee is already registered with the same MAC address."""


class DetectionError(RuntimeError):
    """Processing of a single sighting was aborted.

    Attributes:
        stage: Pipeline stage that failed (``resolve``, ``dedup``,
            ``record`` or ``cancelled``).
    """

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage
