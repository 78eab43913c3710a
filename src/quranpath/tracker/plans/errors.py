"""Exceptions raised by plan stores."""


class PlanValidationError(ValueError):
    """Raised when an operation's arguments break a plan invariant."""

    pass
