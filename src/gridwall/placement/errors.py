"""Exceptions raised by the placement engine.

Running out of room is not an error: the session completes with a
deficiency in its PlacementReport.  Only bad input and re-entrant starts
are raised to the caller.
"""

from __future__ import annotations


class GridwallError(Exception):
    """Base class for placement engine errors."""


class ConfigError(GridwallError, ValueError):
    """Raised when a session cannot start because its inputs are invalid."""

    def __init__(self, field: str, reason: str) -> None:
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid '{field}': {reason}")


class ReentrancyError(GridwallError):
    """Raised when a session is started while another is still generating."""

    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__(f"Generation already in progress (state={state})")
