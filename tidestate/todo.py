"""A small to-do list model with its actions, reducers and file format."""

from __future__ import annotations

import dataclasses
import logging
from pathlib import Path
from typing import Union

from tidestate.serialization import dumps, loads

__all__ = [
    "Item",
    "ToggleItemAction",
    "RemoveItemAction",
    "AddTodoAction",
    "TodoModel",
    "update_item",
    "update_model",
    "save",
    "load",
]

_log = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class Item:
    """A single to-do entry."""

    done: bool = False
    text: str = ""


@dataclasses.dataclass(frozen=True)
class ToggleItemAction:
    """Flip whether an item is done."""


@dataclasses.dataclass(frozen=True)
class RemoveItemAction:
    """Remove an item from the list."""


ItemAction = Union[ToggleItemAction, RemoveItemAction]


@dataclasses.dataclass(frozen=True)
class AddTodoAction:
    """Add a new item with ``text`` to the front of the list."""

    text: str


@dataclasses.dataclass(frozen=True)
class TodoModel:
    """The whole list of to-do items."""

    todos: tuple[Item, ...] = ()


def update_item(item: Item, action: ItemAction) -> Item:
    """Return ``item`` with ``action`` applied."""
    match action:
        case ToggleItemAction():
            return dataclasses.replace(item, done=not item.done)
        case RemoveItemAction():
            return item
        case _:
            raise TypeError(f"unknown item action: {action!r}")


def update_model(model: TodoModel, action: AddTodoAction | tuple[int, ItemAction]) -> TodoModel:
    """Return ``model`` with ``action`` applied.

    ``action`` is either an :class:`AddTodoAction` or a pair of an item index
    and an item action.
    """
    match action:
        case AddTodoAction(text=text):
            if text:
                return dataclasses.replace(model, todos=(Item(False, text),) + model.todos)
            return model
        case (int() as index, item_action):
            if not 0 <= index < len(model.todos):
                _log.error("Invalid todo item action index!")
                return model
            if isinstance(item_action, RemoveItemAction):
                todos = model.todos[:index] + model.todos[index + 1 :]
            else:
                changed = update_item(model.todos[index], item_action)
                todos = model.todos[:index] + (changed,) + model.todos[index + 1 :]
            return dataclasses.replace(model, todos=todos)
        case _:
            raise TypeError(f"unknown model action: {action!r}")


def save(fname: str | Path, model: TodoModel) -> None:
    """Write ``model`` to the file ``fname`` as JSON."""
    Path(fname).write_text(dumps(model), encoding="utf-8")


def load(fname: str | Path) -> TodoModel:
    """Read a model from the JSON file ``fname``."""
    return loads(Path(fname).read_text(encoding="utf-8"), TodoModel)