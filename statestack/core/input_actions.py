from __future__ import annotations

import json
import logging
import os
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

import pygame

from statestack.core import config


logger = logging.getLogger(__name__)

ActionBindings = Dict[str, Tuple[int, ...]]


DEFAULT_ACTION_BINDINGS: ActionBindings = {
    "confirm": (pygame.K_RETURN, pygame.K_SPACE, pygame.K_KP_ENTER),
    "cancel": (pygame.K_ESCAPE, pygame.K_BACKSPACE),
    "up": (pygame.K_UP, pygame.K_w),
    "down": (pygame.K_DOWN, pygame.K_s),
    "pause": (pygame.K_p,),
}


def _resolve_key_code(raw_key: object) -> Optional[int]:
    if isinstance(raw_key, int):
        return raw_key
    if not isinstance(raw_key, str):
        return None
    token = raw_key.strip()
    if not token:
        return None
    if token.startswith("K_"):
        token = token[2:]
    try:
        return pygame.key.key_code(token.lower())
    except (ValueError, TypeError):
        return None


def _normalize_keys(raw_keys: Sequence[object]) -> Tuple[int, ...]:
    normalized: List[int] = []
    seen: Set[int] = set()
    for raw_key in raw_keys:
        key_code = _resolve_key_code(raw_key)
        if key_code is None or key_code in seen:
            continue
        seen.add(key_code)
        normalized.append(key_code)
    return tuple(normalized)


class InputActionMap:
    """Maps keyboard input to the logical actions states react to."""

    def __init__(self, bindings: Optional[Mapping[str, Sequence[object]]] = None) -> None:
        source = dict(DEFAULT_ACTION_BINDINGS)
        if bindings:
            for action, raw_keys in bindings.items():
                source[action] = tuple(raw_keys)
        self._bindings: ActionBindings = {
            action: _normalize_keys(raw_keys) for action, raw_keys in source.items()
        }

    @property
    def bindings(self) -> ActionBindings:
        return dict(self._bindings)

    def keys_for_action(self, action: str) -> Tuple[int, ...]:
        return self._bindings.get(action, ())

    def actions_for_event(self, event: object) -> Set[str]:
        if getattr(event, "type", None) != pygame.KEYDOWN:
            return set()
        key_code = getattr(event, "key", None)
        return {action for action, keys in self._bindings.items() if key_code in keys}

    def matches(self, event: object, action: str) -> bool:
        return action in self.actions_for_event(event)


def _load_binding_overrides(path: str) -> Dict[str, Tuple[int, ...]]:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable input bindings %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        return {}

    overrides: Dict[str, Tuple[int, ...]] = {}
    for action, raw_keys in data.items():
        if not isinstance(action, str) or not isinstance(raw_keys, list):
            continue
        overrides[action] = _normalize_keys(raw_keys)
    return overrides


def load_action_map(path: Optional[str] = None) -> InputActionMap:
    binding_path = path or os.path.join(config.DATA_DIR, config.INPUT_BINDINGS_FILE)
    return InputActionMap(_load_binding_overrides(binding_path))
