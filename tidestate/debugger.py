"""Time-travel debugging for a reducer-driven application.

The debugger wraps the application's model with a history of every applied
action and the model that resulted from it. A cursor selects which point of
the history is current; moving it backwards and forwards undoes and redoes
actions without touching the history itself. While paused, incoming actions
are queued and applied in order when the debugger resumes.

Effects are callables taking a context. The pause and resume effects call
``ctx.loop.pause()`` and ``ctx.loop.resume()`` respectively.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Iterable
from typing import Any

__all__ = [
    "GotoAction",
    "UndoAction",
    "RedoAction",
    "PauseAction",
    "ResumeAction",
    "Step",
    "DebuggerModel",
    "noop",
    "sequence",
    "update",
]

Effect = Callable[[Any], Any]


@dataclasses.dataclass(frozen=True)
class GotoAction:
    """Move the cursor to a given position in the history."""

    cursor: int


@dataclasses.dataclass(frozen=True)
class UndoAction:
    """Move the cursor one step back."""


@dataclasses.dataclass(frozen=True)
class RedoAction:
    """Move the cursor one step forward."""


@dataclasses.dataclass(frozen=True)
class PauseAction:
    """Stop applying actions and queue them instead."""


@dataclasses.dataclass(frozen=True)
class ResumeAction:
    """Apply the queued actions and go on applying new ones."""


_DEBUGGER_ACTIONS = (GotoAction, UndoAction, RedoAction, PauseAction, ResumeAction)


@dataclasses.dataclass(frozen=True)
class Step:
    """An applied action together with the model it produced."""

    action: Any
    model: Any


@dataclasses.dataclass(frozen=True)
class DebuggerModel:
    """The application model wrapped with its history of actions."""

    init: Any
    cursor: int = 0
    paused: bool = False
    history: tuple[Step, ...] = ()
    pending: tuple[Any, ...] = ()

    def lookup(self, cursor: int) -> tuple[Any, Any]:
        """Return the action and model at ``cursor``; position 0 is the start."""
        if cursor < 0 or cursor > len(self.history):
            raise IndexError("bad cursor")
        if cursor == 0:
            return None, self.init
        step = self.history[cursor - 1]
        return step.action, step.model

    def summary(self) -> int:
        """Return the number of steps in the history."""
        return len(self.history)

    def current(self) -> Any:
        """Return the application model at the cursor."""
        return self.lookup(self.cursor)[1]


def _run_all(effects: Iterable[Effect], ctx: Any) -> None:
    for effect in effects:
        effect(ctx)


_NO_EFFECTS: tuple[Effect, ...] = ()


def noop(ctx: Any) -> None:
    """An effect that runs no effects."""
    _run_all(_NO_EFFECTS, ctx)


def sequence(*args: Effect) -> Effect:
    """Return an effect that runs each of ``args`` in order."""
    effects = tuple(e for e in args if e is not noop)
    if not effects:
        return noop
    if len(effects) == 1:
        return effects[0]

    def run(ctx: Any) -> None:
        _run_all(effects, ctx)

    return run


def _pause_effect(ctx: Any) -> None:
    ctx.loop.pause()


def _resume_effect(ctx: Any) -> None:
    ctx.loop.resume()


def _invoke_reducer(reducer: Callable[[Any, Any], Any], model: Any, action: Any) -> tuple[Any, Effect]:
    result = reducer(model, action)
    if isinstance(result, tuple) and len(result) == 2 and callable(result[1]):
        return result[0], result[1]
    return result, noop


def update(
    reducer: Callable[[Any, Any], Any], model: DebuggerModel, action: Any
) -> tuple[DebuggerModel, Effect]:
    """Apply ``action`` to the debugger ``model`` and return it with an effect.

    Any action that is not one of the debugger's own is passed to
    ``reducer``, which may return a model or a ``(model, effect)`` pair.
    """
    match action:
        case GotoAction(cursor=cursor):
            if 0 <= cursor <= len(model.history):
                model = dataclasses.replace(model, cursor=cursor)
            return model, noop
        case UndoAction():
            if model.cursor > 0:
                model = dataclasses.replace(model, cursor=model.cursor - 1)
            return model, noop
        case RedoAction():
            if model.cursor < len(model.history):
                model = dataclasses.replace(model, cursor=model.cursor + 1)
            return model, noop
        case PauseAction():
            return dataclasses.replace(model, paused=True), _pause_effect
        case ResumeAction():
            pending = model.pending
            model = dataclasses.replace(model, paused=False, pending=())
            effect: Effect = noop
            for queued in pending:
                model, new_effect = update(reducer, model, queued)
                effect = sequence(effect, new_effect)
            return model, sequence(_resume_effect, effect)
        case _:
            if model.paused:
                return dataclasses.replace(model, pending=model.pending + (action,)), noop
            state, effect = _invoke_reducer(reducer, model.current(), action)
            history = model.history[: model.cursor] + (Step(action, state),)
            return (
                dataclasses.replace(model, history=history, cursor=len(history)),
                effect,
            )