"""Custom exceptions for Leadtime."""


class LeadtimeError(Exception):
    """Base exception for all Leadtime errors."""

    pass


class ValidationError(LeadtimeError):
    """Raised when task input fails validation."""

    pass


class InputError(ValidationError):
    """Raised when a task cannot be evaluated as supplied.

    Covers missing dates, an empty team map, malformed effort values and a
    due date before the start date. Always raised before evaluation begins.
    """

    pass


class CircularDependencyError(ValidationError):
    """Raised when team prerequisites form a cycle."""

    def __init__(self, cycle: list[str]):
        self.cycle = cycle
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)}")


class MissingReferenceError(InputError):
    """Raised when a team depends on a team that is not part of the task."""

    pass


class ParseError(LeadtimeError):
    """Raised when a task or config document cannot be read."""

    pass
