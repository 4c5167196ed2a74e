from types import SimpleNamespace

import pygame
import pytest

from statestack.core import config
from statestack.core.input_actions import InputActionMap
from statestack.core.state_manager import StateManager
from statestack.ui.states import (
    ConfirmQuitState,
    GameplayState,
    Label,
    MenuState,
    PauseState,
    VisibilityState,
)


def key_event(key):
    return pygame.event.Event(pygame.KEYDOWN, key=key, unicode="")


@pytest.fixture
def actions():
    return InputActionMap()


def test_visibility_state_toggles_visuals_with_stack_position():
    below = SimpleNamespace(visible=False)
    above = SimpleNamespace(visible=False)
    manager = StateManager(lambda: VisibilityState([below]))
    assert below.visible is True

    manager.push(VisibilityState([above]))
    assert below.visible is False
    assert above.visible is True

    manager.pop()
    assert below.visible is True
    assert above.visible is False


def test_menu_confirm_pushes_gameplay_and_hides_menu(actions):
    menu = MenuState(actions)
    manager = StateManager(lambda: menu)
    assert menu.title.visible is True

    menu.handle_event(manager, key_event(pygame.K_RETURN))

    assert isinstance(manager.current_state, GameplayState)
    assert menu.title.visible is False
    assert all(not label.visible for label in menu.options)


def test_menu_quit_option_clears_stack(actions):
    menu = MenuState(actions)
    manager = StateManager(lambda: menu)

    menu.handle_event(manager, key_event(pygame.K_DOWN))
    assert menu.selected_index == 1
    assert menu.options[1].color == config.HIGHLIGHT_COLOR
    assert menu.options[0].color == config.TEXT_COLOR

    menu.handle_event(manager, key_event(pygame.K_RETURN))
    assert manager.is_empty


def test_menu_selection_wraps_around(actions):
    menu = MenuState(actions)
    manager = StateManager(lambda: menu)

    menu.handle_event(manager, key_event(pygame.K_UP))
    assert menu.selected_index == len(MenuState.OPTIONS) - 1


def test_menu_cancel_pops_last_state(actions):
    menu = MenuState(actions)
    manager = StateManager(lambda: menu)

    menu.handle_event(manager, key_event(pygame.K_ESCAPE))

    assert manager.current_state is None


def test_pause_flow_through_confirmation(actions):
    gameplay = GameplayState(actions)
    manager = StateManager(lambda: gameplay)

    gameplay.handle_event(manager, key_event(pygame.K_p))
    pause = manager.current_state
    assert isinstance(pause, PauseState)
    assert gameplay.hint.visible is False

    pause.handle_event(manager, key_event(pygame.K_RETURN))
    confirm = manager.current_state
    assert isinstance(confirm, ConfirmQuitState)

    confirm.handle_event(manager, key_event(pygame.K_ESCAPE))
    assert manager.current_state is pause

    pause.handle_event(manager, key_event(pygame.K_ESCAPE))
    assert manager.current_state is gameplay
    assert gameplay.hint.visible is True

    gameplay.handle_event(manager, key_event(pygame.K_ESCAPE))
    manager.current_state.handle_event(manager, key_event(pygame.K_RETURN))
    manager.current_state.handle_event(manager, key_event(pygame.K_RETURN))
    assert manager.is_empty


def test_gameplay_box_bounces_at_window_edge(actions):
    gameplay = GameplayState(actions)
    manager = StateManager(lambda: gameplay)

    gameplay.update(manager, 0.5)
    assert gameplay.x == pytest.approx(GameplayState.SPEED_PIXELS_PER_SECOND * 0.5)

    gameplay.update(manager, 100.0)
    assert gameplay.x == config.WINDOW_WIDTH - GameplayState.BOX_SIZE
    assert gameplay.direction == -1
    assert gameplay.elapsed_seconds == pytest.approx(100.5)


def test_overlays_are_flagged(actions):
    assert PauseState(actions).is_overlay
    assert ConfirmQuitState(actions).is_overlay
    assert not GameplayState(actions).is_overlay


def test_hidden_label_draws_nothing():
    label = Label("hidden", (10, 10))
    assert label.draw(pygame.Surface((20, 20))) is None


def test_visible_states_render_onto_surface(actions):
    screen = pygame.Surface((config.WINDOW_WIDTH, config.WINDOW_HEIGHT))
    gameplay = GameplayState(actions)
    manager = StateManager(lambda: gameplay)
    manager.push(PauseState(actions))

    gameplay.draw(manager, screen)
    manager.current_state.draw(manager, screen)

    assert screen.get_at((0, 0))[:3] != config.BG_COLOR
