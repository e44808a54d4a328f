"""Derive equality, hashing, reflection and archiving for plain classes.

A class names its members once, and ``derive`` generates the selected
behaviour from that list:

    @derive(Trait.EQ | Trait.HASH | Trait.HANA, "x", "y")
    @dataclass(eq=False)
    class Point:
        x: int = 0
        y: int = 0
"""

from __future__ import annotations

import enum
import keyword
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

__all__ = ["Trait", "derive", "members_of", "hash_combine"]

_T = TypeVar("_T", bound=type)

_MEMBERS_ATTR = "__derived_members__"
_MASK = (1 << 64) - 1
_GOLDEN = 0x9E3779B9


class Trait(enum.Flag):
    """Behaviours that ``derive`` can generate for a class."""

    EQ = enum.auto()
    HASH = enum.auto()
    HANA = enum.auto()
    CEREAL = enum.auto()
    ALL = EQ | HASH | HANA | CEREAL


def hash_combine(seed: int, value: Any) -> int:
    """Mix the hash of ``value`` into ``seed`` and return the new 64-bit seed."""
    seed &= _MASK
    mixed = (hash(value) + _GOLDEN + ((seed << 6) & _MASK) + (seed >> 2)) & _MASK
    return seed ^ mixed


def _normalise_traits(traits: Trait | Iterable[Trait]) -> Trait:
    if isinstance(traits, Trait):
        return traits
    result = Trait(0)
    for trait in traits:
        if not isinstance(trait, Trait):
            raise TypeError(f"expected a Trait, got {trait!r}")
        result |= trait
    return result


def _check_members(members: tuple[str, ...]) -> tuple[str, ...]:
    seen: set[str] = set()
    for name in members:
        if not isinstance(name, str):
            raise TypeError(f"member names must be strings, got {name!r}")
        if not name.isidentifier() or keyword.iskeyword(name):
            raise ValueError(f"invalid member name: {name!r}")
        if name in seen:
            raise ValueError(f"duplicate member name: {name!r}")
        seen.add(name)
    return members


def _values(obj: Any, members: tuple[str, ...]) -> tuple[Any, ...]:
    return tuple(getattr(obj, name) for name in members)


def _install_eq(cls: type, members: tuple[str, ...]) -> None:
    def __eq__(self: Any, other: Any) -> Any:
        if other.__class__ is not self.__class__:
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in members)

    def __ne__(self: Any, other: Any) -> Any:
        result = __eq__(self, other)
        if result is NotImplemented:
            return result
        return not result

    cls.__eq__ = __eq__  # type: ignore[method-assign]
    cls.__ne__ = __ne__  # type: ignore[method-assign]


def _install_hash(cls: type, members: tuple[str, ...]) -> None:
    def __hash__(self: Any) -> int:
        seed = 0
        for value in _values(self, members):
            seed = hash_combine(seed, value)
        return seed

    cls.__hash__ = __hash__  # type: ignore[method-assign]


def _install_cereal(cls: type, members: tuple[str, ...]) -> None:
    def to_archive(self: Any) -> dict[str, Any]:
        """Return the members as an ordered name-to-value mapping."""
        return {name: getattr(self, name) for name in members}

    def from_archive(klass: type, data: Mapping[str, Any]) -> Any:
        """Build an instance from a name-to-value mapping."""
        missing = [name for name in members if name not in data]
        if missing:
            raise KeyError(f"missing member(s) in archive: {', '.join(missing)}")
        return klass(**{name: data[name] for name in members})

    cls.to_archive = to_archive  # type: ignore[attr-defined]
    cls.from_archive = classmethod(from_archive)  # type: ignore[attr-defined]


def derive(traits: Trait | Iterable[Trait], *args: str) -> Callable[[_T], _T]:
    """Return a class decorator generating ``traits`` over the members ``args``."""
    selected = _normalise_traits(traits)
    members = _check_members(tuple(args))

    def decorate(cls: _T) -> _T:
        if not isinstance(cls, type):
            raise TypeError("derive can only be applied to classes")
        if Trait.EQ in selected:
            _install_eq(cls, members)
            if Trait.HASH not in selected:
                cls.__hash__ = None  # type: ignore[assignment]
        if Trait.HASH in selected:
            _install_hash(cls, members)
        if Trait.HANA in selected:
            setattr(cls, _MEMBERS_ATTR, members)
        if Trait.CEREAL in selected:
            _install_cereal(cls, members)
        return cls

    return decorate


def members_of(obj: Any) -> dict[str, Any]:
    """Return the reflected members of ``obj`` in declaration order."""
    members = getattr(type(obj), _MEMBERS_ATTR, None)
    if members is None:
        raise TypeError(
            f"{type(obj).__name__} does not provide member reflection"
        )
    return {name: getattr(obj, name) for name in members}