from __future__ import annotations


class State:
    """Base state contract for the state stack.

    The manager calls ``on_state_enter`` each time the instance becomes the
    top of the stack and ``on_state_exit`` each time it stops being the top.
    """

    def on_state_enter(self) -> None:
        return

    def on_state_exit(self) -> None:
        return

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


def is_state(obj: object) -> bool:
    if obj is None:
        return False
    return callable(getattr(obj, "on_state_enter", None)) and callable(getattr(obj, "on_state_exit", None))
