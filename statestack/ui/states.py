from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Tuple

import pygame

from statestack.core import config
from statestack.core.input_actions import InputActionMap, load_action_map
from statestack.core.state import State
from statestack.core.state_manager import StateManager


_FONT_CACHE: Dict[Tuple[Optional[str], int], pygame.font.Font] = {}


def get_font(path: Optional[str], size: int) -> pygame.font.Font:
    cache_key = (path, int(size))
    if cache_key in _FONT_CACHE:
        return _FONT_CACHE[cache_key]

    if not pygame.font.get_init():
        pygame.font.init()

    try:
        font = pygame.font.Font(path, int(size))
    except (pygame.error, OSError, TypeError):
        font = pygame.font.Font(None, int(size))

    _FONT_CACHE[cache_key] = font
    return font


class Label:
    """Text element that only renders while visible."""

    def __init__(
        self,
        text: str,
        center: Tuple[int, int],
        *,
        size: int = config.OPTION_FONT_SIZE,
        color: Tuple[int, int, int] = config.TEXT_COLOR,
    ) -> None:
        self.text = text
        self.center = center
        self.size = size
        self.color = color
        self.visible = False

    def draw(self, screen: pygame.Surface) -> Optional[pygame.Rect]:
        if not self.visible:
            return None
        surface = get_font(config.DEFAULT_FONT, self.size).render(self.text, True, self.color)
        rect = surface.get_rect(center=self.center)
        screen.blit(surface, rect)
        return rect


class GameState(State):
    """State driven once per frame by the game loop.

    Frame hooks receive the manager so a state can push or pop itself;
    ``is_overlay`` states are drawn on top of the state below them.
    """

    is_overlay = False

    def handle_event(self, manager: StateManager, event: object) -> None:
        return

    def update(self, manager: StateManager, dt_seconds: float) -> None:
        return

    def draw(self, manager: StateManager, screen: pygame.Surface) -> None:
        return


class VisibilityState(GameState):
    """Shows its visuals while active and hides them otherwise."""

    def __init__(self, visuals: Iterable[object] = ()) -> None:
        self.visuals: List[object] = list(visuals)

    def on_state_enter(self) -> None:
        for visual in self.visuals:
            visual.visible = True

    def on_state_exit(self) -> None:
        for visual in self.visuals:
            visual.visible = False

    def draw(self, manager: StateManager, screen: pygame.Surface) -> None:
        for visual in self.visuals:
            draw = getattr(visual, "draw", None)
            if callable(draw):
                draw(screen)


def _centered(offset_y: int) -> Tuple[int, int]:
    return (config.WINDOW_WIDTH // 2, config.WINDOW_HEIGHT // 2 + offset_y)


class MenuState(VisibilityState):
    OPTIONS = ("Play", "Quit")

    def __init__(self, actions: InputActionMap | None = None) -> None:
        self.actions = actions or load_action_map()
        self.selected_index = 0
        self.title = Label("statestack", _centered(-140), size=config.TITLE_FONT_SIZE)
        self.options = [Label(label, _centered(-20 + i * 55)) for i, label in enumerate(self.OPTIONS)]
        super().__init__([self.title, *self.options])

    def _refresh_highlight(self) -> None:
        for i, label in enumerate(self.options):
            label.color = config.HIGHLIGHT_COLOR if i == self.selected_index else config.TEXT_COLOR

    def on_state_enter(self) -> None:
        super().on_state_enter()
        self._refresh_highlight()

    def handle_event(self, manager: StateManager, event: object) -> None:
        if self.actions.matches(event, "down"):
            self.selected_index = (self.selected_index + 1) % len(self.OPTIONS)
            self._refresh_highlight()
        elif self.actions.matches(event, "up"):
            self.selected_index = (self.selected_index - 1) % len(self.OPTIONS)
            self._refresh_highlight()
        elif self.actions.matches(event, "confirm"):
            if self.OPTIONS[self.selected_index] == "Play":
                manager.push(GameplayState(self.actions))
            else:
                manager.clear()
        elif self.actions.matches(event, "cancel"):
            manager.pop()

    def draw(self, manager: StateManager, screen: pygame.Surface) -> None:
        screen.fill(config.BG_COLOR)
        super().draw(manager, screen)


class GameplayState(VisibilityState):
    SPEED_PIXELS_PER_SECOND = 240.0
    BOX_SIZE = 40

    def __init__(self, actions: InputActionMap | None = None) -> None:
        self.actions = actions or load_action_map()
        self.x = 0.0
        self.direction = 1
        self.elapsed_seconds = 0.0
        self.hint = Label(
            "Esc / P to pause",
            (config.WINDOW_WIDTH // 2, config.WINDOW_HEIGHT - 30),
            size=config.HINT_FONT_SIZE,
            color=config.HINT_COLOR,
        )
        super().__init__([self.hint])

    def handle_event(self, manager: StateManager, event: object) -> None:
        if self.actions.matches(event, "cancel") or self.actions.matches(event, "pause"):
            manager.push(PauseState(self.actions))

    def update(self, manager: StateManager, dt_seconds: float) -> None:
        self.elapsed_seconds += dt_seconds
        limit = config.WINDOW_WIDTH - self.BOX_SIZE
        self.x += self.direction * self.SPEED_PIXELS_PER_SECOND * dt_seconds
        if self.x >= limit:
            self.x = float(limit)
            self.direction = -1
        elif self.x <= 0:
            self.x = 0.0
            self.direction = 1

    def draw(self, manager: StateManager, screen: pygame.Surface) -> None:
        screen.fill(config.BG_COLOR)
        box = pygame.Rect(int(self.x), config.WINDOW_HEIGHT // 2 - self.BOX_SIZE // 2, self.BOX_SIZE, self.BOX_SIZE)
        pygame.draw.rect(screen, config.HIGHLIGHT_COLOR, box)
        super().draw(manager, screen)


class _OverlayState(VisibilityState):
    is_overlay = True

    def draw(self, manager: StateManager, screen: pygame.Surface) -> None:
        veil = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        veil.fill(config.OVERLAY_COLOR)
        screen.blit(veil, (0, 0))
        super().draw(manager, screen)


class PauseState(_OverlayState):
    def __init__(self, actions: InputActionMap | None = None) -> None:
        self.actions = actions or load_action_map()
        super().__init__(
            [
                Label("Paused", _centered(-40), size=config.TITLE_FONT_SIZE),
                Label("Esc to resume, Enter to quit", _centered(30), size=config.HINT_FONT_SIZE),
            ]
        )

    def handle_event(self, manager: StateManager, event: object) -> None:
        if self.actions.matches(event, "cancel") or self.actions.matches(event, "pause"):
            manager.pop()
        elif self.actions.matches(event, "confirm"):
            manager.push(ConfirmQuitState(self.actions))


class ConfirmQuitState(_OverlayState):
    def __init__(self, actions: InputActionMap | None = None) -> None:
        self.actions = actions or load_action_map()
        super().__init__(
            [
                Label("Quit?", _centered(-40), size=config.TITLE_FONT_SIZE),
                Label("Enter to quit, Esc to go back", _centered(30), size=config.HINT_FONT_SIZE),
            ]
        )

    def handle_event(self, manager: StateManager, event: object) -> None:
        if self.actions.matches(event, "confirm"):
            manager.clear()
        elif self.actions.matches(event, "cancel"):
            manager.pop()
