from __future__ import annotations


class StateStackError(Exception):
    """Base class for errors raised by the state stack itself."""


class InvalidInitialStateError(StateStackError):
    """The initial-state factory was missing or produced no state."""


class InvalidArgumentError(StateStackError, ValueError):
    """A transition was requested with something that is not a state."""


class EmptyStackError(StateStackError, IndexError):
    """Pop was requested with no removable state on the stack."""


class TransitionDepthError(StateStackError, RecursionError):
    """Transitions nested deeper than the manager allows."""

    def __init__(self, depth: int, limit: int) -> None:
        super().__init__(f"Transition nesting depth {depth} exceeds limit {limit}.")
        self.depth = depth
        self.limit = limit
