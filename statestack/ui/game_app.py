from __future__ import annotations

import argparse
import logging
from typing import List, Optional, Sequence

import pygame

from statestack.core import config
from statestack.core.state_manager import StateFactory, StateManager
from statestack.ui.states import GameState, MenuState


logger = logging.getLogger(__name__)


class GameApp:
    """Top-level app runtime owning one pygame window, its loop and the state stack."""

    def __init__(
        self,
        initial_state: StateFactory,
        *,
        title: str = config.WINDOW_TITLE,
        window_size: tuple[int, int] = (config.WINDOW_WIDTH, config.WINDOW_HEIGHT),
        allow_empty: bool = config.ALLOW_EMPTY_STACK,
    ) -> None:
        pygame.init()
        self.screen = pygame.display.set_mode(window_size)
        pygame.display.set_caption(title)
        self.clock = pygame.time.Clock()
        self._running = True
        self.state_manager = StateManager(initial_state, allow_empty=allow_empty)

    @property
    def is_running(self) -> bool:
        return self._running and not self.state_manager.is_empty

    def stop(self) -> None:
        self._running = False

    def _frame_state(self) -> Optional[GameState]:
        state = self.state_manager.current_state
        return state if isinstance(state, GameState) else None

    def handle_event(self, event: object) -> None:
        state = self._frame_state()
        if state is not None:
            state.handle_event(self.state_manager, event)

    def update(self, dt_seconds: float) -> None:
        state = self._frame_state()
        if state is not None:
            state.update(self.state_manager, dt_seconds)

    def visible_states(self) -> List[GameState]:
        """Top state plus everything beneath it that overlays let through, bottom-first."""
        layers: List[GameState] = []
        for state in reversed(self.state_manager.states):
            if not isinstance(state, GameState):
                break
            layers.append(state)
            if not state.is_overlay:
                break
        layers.reverse()
        return layers

    def draw(self, screen: pygame.Surface | None = None) -> None:
        target = screen if screen is not None else self.screen
        for state in self.visible_states():
            state.draw(self.state_manager, target)

    def run(self) -> None:
        while self.is_running:
            dt_seconds = self.clock.tick(config.FPS) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    self.stop()
                    break
                self.handle_event(event)
                if not self.is_running:
                    break

            if not self.is_running:
                break

            self.update(dt_seconds)
            if not self.is_running:
                break

            self.draw(self.screen)
            pygame.display.flip()

        logger.debug("Loop finished with %d state(s) on the stack.", self.state_manager.stack_size)
        self.state_manager.clear()
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Layered state stack demo.")
    parser.add_argument("--verbose", action="store_true", help="Log every state transition.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    app = GameApp(MenuState)
    app.run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
