"""Main interactive event loop for the terminal UI.

Feeds resize, result and key events through ``update`` and hands the
returned effects to injected callbacks. Feature logic lives in ``update``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from ..events import Effect, Event, KeyPressed, Quit, Resized
from ..input import read_key
from ..state import AppState
from ..update import update
from .terminal import TerminalController

logger = logging.getLogger(__name__)

KEY_TIMEOUT_MS = 50


@dataclass(frozen=True)
class RuntimeLoopCallbacks:
    """Injected I/O operations used by ``run_main_loop``."""

    render: Callable[[AppState], None]
    run_effect: Callable[[Effect], None]
    drain_results: Callable[[], list[Event]]
    terminal_size: Callable[[], tuple[int, int]]


def run_effects(effects: Iterable[Effect], callbacks: RuntimeLoopCallbacks) -> bool:
    """Run every non-quit effect in order; return whether a quit was requested."""
    quit_requested = False
    for effect in effects:
        if isinstance(effect, Quit):
            quit_requested = True
            continue
        callbacks.run_effect(effect)
    return quit_requested


def run_main_loop(
    state: AppState,
    terminal: TerminalController,
    stdin_fd: int,
    callbacks: RuntimeLoopCallbacks,
    startup_effects: Iterable[Effect] = (),
    key_timeout_ms: int = KEY_TIMEOUT_MS,
) -> AppState:
    """Run the interactive loop until an event produces a ``Quit`` effect.

    Returns the final state.
    """
    run_effects(startup_effects, callbacks)

    def apply(event: Event) -> bool:
        nonlocal state
        state, effects = update(state, event)
        return run_effects(effects, callbacks)

    with terminal.raw_mode():
        while True:
            width, height = callbacks.terminal_size()
            if (width, height) != (state.width, state.height):
                if apply(Resized(width, height)):
                    return state

            for event in callbacks.drain_results():
                if apply(event):
                    return state

            if state.dirty:
                callbacks.render(state)
                state.dirty = False

            try:
                key = read_key(stdin_fd, timeout_ms=key_timeout_ms)
            except KeyboardInterrupt:
                continue
            if key == "":
                continue
            logger.debug("key %r", key)
            if apply(KeyPressed(key)):
                return state


__all__ = ["KEY_TIMEOUT_MS", "RuntimeLoopCallbacks", "run_effects", "run_main_loop"]
