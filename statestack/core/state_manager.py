from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, List, Optional, Tuple

from statestack.core import config
from statestack.core.errors import (
    EmptyStackError,
    InvalidArgumentError,
    InvalidInitialStateError,
    TransitionDepthError,
)
from statestack.core.state import State, is_state


logger = logging.getLogger(__name__)

StateFactory = Callable[[], Optional[State]]


class StateManager:
    """Deterministic stack-based state manager.

    Every transition exits the active state before the stack changes and
    enters the new top afterwards. Hooks may start transitions on the same
    manager; a nested transition finishes its mutation before the outer one
    continues, and the outer one then enters whatever ended up on top.

    A hook that raises propagates to the caller. A failed exit leaves the
    stack untouched and the state still active; a failed enter leaves the
    state on top and active, so its exit is still delivered later.
    """

    def __init__(
        self,
        initial_state: StateFactory | None,
        *,
        allow_empty: bool = config.ALLOW_EMPTY_STACK,
        max_transition_depth: int = config.MAX_TRANSITION_DEPTH,
    ) -> None:
        self._initial_state_factory = initial_state
        self.allow_empty = allow_empty
        self.max_transition_depth = max_transition_depth
        self._stack: List[State] = []
        self._active: Optional[State] = None
        self._depth = 0

        state = self.get_initial_state()
        if state is None:
            raise InvalidInitialStateError("Initial state factory returned no state.")
        if not is_state(state):
            raise InvalidInitialStateError(
                f"Initial state factory returned {type(state).__name__}, which is not a state."
            )
        self.push(state)

    def get_initial_state(self) -> Optional[State]:
        if self._initial_state_factory is None:
            return None
        return self._initial_state_factory()

    @property
    def current_state(self) -> Optional[State]:
        return self._stack[-1] if self._stack else None

    @property
    def active_state(self) -> Optional[State]:
        """State that has been entered and not yet exited, if any."""
        return self._active

    @property
    def stack_size(self) -> int:
        return len(self._stack)

    @property
    def is_empty(self) -> bool:
        return not self._stack

    @property
    def states(self) -> Tuple[State, ...]:
        """Bottom-first snapshot of the stack."""
        return tuple(self._stack)

    @property
    def transition_depth(self) -> int:
        return self._depth

    def __len__(self) -> int:
        return len(self._stack)

    def push(self, state: State) -> None:
        self._require_state(state, "push")
        with self._transition("push"):
            self._exit_active()
            self._stack.append(state)
            self._enter_top()

    def pop(self) -> State:
        if not self._stack:
            raise EmptyStackError("Cannot pop from an empty state stack.")
        if not self.allow_empty and len(self._stack) == 1:
            raise EmptyStackError("Cannot pop the last remaining state while empty stacks are disallowed.")
        with self._transition("pop"):
            index = len(self._stack) - 1
            exiting = self._stack[index]
            self._exit_active()
            # A hook may already have removed it.
            if index < len(self._stack) and self._stack[index] is exiting:
                del self._stack[index]
            self._enter_top()
        return exiting

    def replace(self, state: State) -> Optional[State]:
        self._require_state(state, "replace")
        replaced: Optional[State] = None
        with self._transition("replace"):
            if self._stack:
                index = len(self._stack) - 1
                replaced = self._stack[index]
                self._exit_active()
                if index < len(self._stack) and self._stack[index] is replaced:
                    self._stack[index] = state
                else:
                    self._stack.append(state)
            else:
                self._stack.append(state)
            self._enter_top()
        return replaced

    def clear(self) -> Tuple[State, ...]:
        if not self._stack:
            return ()
        with self._transition("clear"):
            while self._active is not None:
                self._exit_active()
            removed = tuple(self._stack)
            self._stack.clear()
        return removed

    @contextmanager
    def _transition(self, operation: str) -> Iterator[None]:
        if self._depth >= self.max_transition_depth:
            logger.warning(
                "Refusing %s: %d transitions already nested (limit %d).",
                operation,
                self._depth,
                self.max_transition_depth,
            )
            raise TransitionDepthError(self._depth + 1, self.max_transition_depth)
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1
        logger.debug("%s -> top=%r size=%d depth=%d", operation, self.current_state, len(self._stack), self._depth)

    def _exit_active(self) -> None:
        state = self._active
        if state is None:
            return
        self._active = None
        try:
            state.on_state_exit()
        except Exception:
            # Only a state still on top can stay active.
            if self._active is None and self._stack and self._stack[-1] is state:
                self._active = state
            raise

    def _enter_top(self) -> None:
        while True:
            top = self.current_state
            if top is None or top is self._active:
                return
            if self._active is not None:
                # Something a hook pushed is active below the real top.
                self._exit_active()
                continue
            self._active = top
            top.on_state_enter()
            return

    @staticmethod
    def _require_state(state: object, operation: str) -> None:
        if state is None:
            raise InvalidArgumentError(f"Cannot {operation} None onto the state stack.")
        if not is_state(state):
            raise InvalidArgumentError(
                f"Cannot {operation} {type(state).__name__}: on_state_enter/on_state_exit hooks are required."
            )
