"""Convert values to and from JSON-compatible data.

Structures are written as objects keyed by member name. Member names can be
camel-cased by setting ``serialize_camel_case = True`` on the class. Enums are
written by name. Sequences and sets become lists. Boxes become
``{"value": ...}``.
"""

from __future__ import annotations

import dataclasses
import enum
import json
import types
import typing
from collections.abc import Mapping
from typing import Any, Generic, TypeVar, Union

from tidestate.derive import members_of

__all__ = ["Box", "to_camel_case", "to_data", "from_data", "dumps", "loads"]

_V = TypeVar("_V")


@dataclasses.dataclass(frozen=True)
class Box(Generic[_V]):
    """An immutable holder of a single value."""

    value: _V


def to_camel_case(name: str) -> str:
    """Convert snake_case, SCREAMING_CASE and kebab-case to camelCase."""
    out: list[str] = []
    new_word = False
    for char in name:
        if char.isascii() and char.isdigit():
            out.append(char)
        elif not (char.isascii() and char.isalpha()):
            new_word = True
        elif new_word:
            out.append(char.upper())
            new_word = False
        else:
            out.append(char.lower())
    return "".join(out)


def _camel_case(cls: type) -> bool:
    return getattr(cls, "serialize_camel_case", False) is True


def _key_for(cls: type, name: str) -> str:
    return to_camel_case(name) if _camel_case(cls) else name


def _struct_members(value: Any) -> dict[str, Any] | None:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
    try:
        return members_of(value)
    except TypeError:
        pass
    to_archive = getattr(value, "to_archive", None)
    if callable(to_archive):
        return dict(to_archive())
    return None


def _sorted_if_possible(items: Any) -> list[Any]:
    items = list(items)
    try:
        return sorted(items)
    except TypeError:
        return items


def to_data(value: Any) -> Any:
    """Return a JSON-compatible representation of ``value``."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Box):
        return {"value": to_data(value.value)}
    if isinstance(value, enum.Enum):
        if value.name is None:
            raise ValueError(f"enum value without a name: {value!r}")
        return value.name
    if isinstance(value, Mapping):
        result = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise TypeError(f"mapping keys must be strings, got {key!r}")
            result[key] = to_data(item)
        return result
    if isinstance(value, (list, tuple)):
        return [to_data(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return [to_data(item) for item in _sorted_if_possible(value)]
    members = _struct_members(value)
    if members is not None:
        cls = type(value)
        return {_key_for(cls, name): to_data(item) for name, item in members.items()}
    raise TypeError(f"cannot serialize value of type {type(value).__name__}")


def _expect(data: Any, kind: type | tuple[type, ...], what: str) -> None:
    if not isinstance(data, kind):
        raise ValueError(f"expected {what}, got {type(data).__name__}")


def _is_class_var(hint: Any) -> bool:
    if isinstance(hint, str):
        return hint.startswith(("ClassVar", "typing.ClassVar"))
    return hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar


def _resolved(hint: Any, cls: type, name: str) -> Any:
    if isinstance(hint, str):
        raise TypeError(
            f"cannot resolve postponed annotation {hint!r} "
            f"of member {name!r} in {cls.__name__}"
        )
    return hint


def _annotations(cls: type) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for klass in reversed(cls.__mro__):
        result.update(klass.__dict__.get("__annotations__", {}))
    return result


def _load_union(data: Any, options: tuple[Any, ...]) -> Any:
    if data is None and type(None) in options:
        return None
    errors: list[str] = []
    for option in options:
        if option is type(None):
            continue
        try:
            return from_data(data, option)
        except ValueError as err:
            errors.append(str(err))
    raise ValueError("no alternative matched: " + "; ".join(errors))


def _load_tuple(data: Any, args: tuple[Any, ...]) -> tuple[Any, ...]:
    _expect(data, list, "a list")
    if not args:
        return tuple(data)
    if len(args) == 2 and args[1] is Ellipsis:
        return tuple(from_data(item, args[0]) for item in data)
    if len(args) != len(data):
        raise ValueError(f"expected {len(args)} elements, got {len(data)}")
    return tuple(from_data(item, arg) for item, arg in zip(data, args))


def _load_set(data: Any, args: tuple[Any, ...], kind: type) -> Any:
    _expect(data, list, "a list")
    element = args[0] if args else Any
    result = kind(from_data(item, element) for item in data)
    if len(result) != len(data):
        raise ValueError("duplicate items?")
    return result


def _load_dict(data: Any, args: tuple[Any, ...]) -> dict[str, Any]:
    _expect(data, Mapping, "an object")
    element = args[1] if len(args) == 2 else Any
    return {key: from_data(item, element) for key, item in data.items()}


def _load_enum(data: Any, cls: type[enum.Enum]) -> enum.Enum:
    _expect(data, str, "an enum name")
    try:
        return cls[data]
    except KeyError:
        raise ValueError(f"{data!r} is not a member of {cls.__name__}") from None


def _load_struct(data: Any, cls: type) -> Any:
    _expect(data, Mapping, "an object")
    kwargs: dict[str, Any] = {}
    if dataclasses.is_dataclass(cls):
        for field in dataclasses.fields(cls):
            if not field.init:
                continue
            key = _key_for(cls, field.name)
            if key in data:
                hint = _resolved(field.type, cls, field.name)
                kwargs[field.name] = from_data(data[key], hint)
            elif (
                field.default is dataclasses.MISSING
                and field.default_factory is dataclasses.MISSING
            ):
                raise ValueError(f"missing member {key!r} for {cls.__name__}")
    else:
        for name, hint in _annotations(cls).items():
            if _is_class_var(hint):
                continue
            key = _key_for(cls, name)
            if key in data:
                kwargs[name] = from_data(data[key], _resolved(hint, cls, name))
    return cls(**kwargs)


def from_data(data: Any, cls: Any) -> Any:
    """Build a value of type ``cls`` from JSON-compatible ``data``."""
    if cls is Any or cls is object:
        return data
    if cls is None or cls is type(None):
        if data is not None:
            raise ValueError(f"expected null, got {type(data).__name__}")
        return None

    origin = typing.get_origin(cls)
    args = typing.get_args(cls)
    if origin is Union or origin is types.UnionType:
        return _load_union(data, args)
    if origin is Box or cls is Box:
        _expect(data, Mapping, "an object")
        if "value" not in data:
            raise ValueError("missing member 'value' for Box")
        return Box(from_data(data["value"], args[0] if args else Any))

    container = origin if origin is not None else cls
    if container is list:
        _expect(data, list, "a list")
        element = args[0] if args else Any
        return [from_data(item, element) for item in data]
    if container is tuple:
        return _load_tuple(data, args)
    if container in (set, frozenset):
        return _load_set(data, args, container)
    if container is dict:
        return _load_dict(data, args)

    if not isinstance(cls, type):
        raise TypeError(f"cannot deserialize into {cls!r}")
    if issubclass(cls, enum.Enum):
        return _load_enum(data, cls)
    if cls is bool:
        _expect(data, bool, "a boolean")
        return data
    if cls is int:
        if isinstance(data, bool) or not isinstance(data, int):
            raise ValueError(f"expected an integer, got {type(data).__name__}")
        return data
    if cls is float:
        if isinstance(data, bool) or not isinstance(data, (int, float)):
            raise ValueError(f"expected a number, got {type(data).__name__}")
        return float(data)
    if cls is str:
        _expect(data, str, "a string")
        return data
    if dataclasses.is_dataclass(cls) or _annotations(cls):
        return _load_struct(data, cls)
    raise TypeError(f"cannot deserialize into {cls.__name__}")


def dumps(value: Any) -> str:
    """Serialize ``value`` to a JSON document."""
    return json.dumps(to_data(value), indent=4)


def loads(text: str, cls: Any) -> Any:
    """Parse a JSON document into a value of type ``cls``."""
    return from_data(json.loads(text), cls)