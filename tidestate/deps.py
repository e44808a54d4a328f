"""A bag of keyed dependencies that can be narrowed and combined.

Each dependency is described by a :class:`Spec`, which fixes its key, its
value type and how it is stored. A :class:`Deps` can be projected onto another
set of specifications as long as every required dependency of the target is
also required in the source. This lets an application hold one bag with all
of its context and hand each component only the part that it needs.

    root = Deps.create([key(UserDb, ref(Database)), ref(Logger)], db, log)
    part = root.project(key(UserDb, ref(Database)), opt(ref(Logger)))
    part.get(UserDb)           # -> db
    part.has(Logger)           # -> True
"""

from __future__ import annotations

import copy
import dataclasses
from collections.abc import Callable, Hashable, Iterable, Iterator, Mapping
from typing import Any

__all__ = [
    "MissingDependencyError",
    "Spec",
    "Deps",
    "to_spec",
    "val",
    "ref",
    "opt",
    "fn",
    "key",
    "make_deps",
    "get",
    "has",
    "is_deps",
]


class MissingDependencyError(RuntimeError):
    """Raised when a dependency that is needed has not been provided."""


class _Absent:
    __slots__ = ()

    def __repr__(self) -> str:
        return "<absent>"


_ABSENT = _Absent()


@dataclasses.dataclass(frozen=True)
class Spec:
    """How a single dependency is keyed, typed and stored.

    ``required`` is false for optional dependencies, ``indirect`` is true for
    dependencies provided through a function, and ``shared`` is true for
    dependencies held by reference rather than copied.
    """

    key: Hashable
    type: Any
    required: bool = True
    indirect: bool = False
    shared: bool = False


def _describe(k: Any) -> str:
    return getattr(k, "__qualname__", None) or repr(k)


def _innermost(t: Any, what: str) -> Any:
    if isinstance(t, Spec):
        raise TypeError(f"{what}() must be a most nested descriptor")
    return t


def val(t: Any) -> Spec:
    """Specify a dependency keyed by ``t`` and stored as a copy."""
    t = _innermost(t, "val")
    return Spec(key=t, type=t)


def ref(t: Any) -> Spec:
    """Specify a dependency keyed by ``t`` and held by reference."""
    t = _innermost(t, "ref")
    return Spec(key=t, type=t, shared=True)


def to_spec(t: Any) -> Spec:
    """Return ``t`` if it is a specification, otherwise ``val(t)``."""
    return t if isinstance(t, Spec) else val(t)


def opt(t: Any) -> Spec:
    """Make the specification or type ``t`` optional."""
    return dataclasses.replace(to_spec(t), required=False)


def fn(t: Any) -> Spec:
    """Make the specification or type ``t`` provided through a function."""
    return dataclasses.replace(to_spec(t), indirect=True)


def key(k: Hashable, t: Any) -> Spec:
    """Associate the specification or type ``t`` with the key ``k``."""
    return dataclasses.replace(to_spec(t), key=k)


def _spec_map(specs: Iterable[Any]) -> dict[Hashable, Spec]:
    result: dict[Hashable, Spec] = {}
    for item in specs:
        spec = to_spec(item)
        if spec.key in result:
            raise ValueError(
                "There are dependencies with duplicate keys. "
                "Use key() to disambiguate them."
            )
        result[spec.key] = spec
    return result


def _store(spec: Spec, value: Any) -> Any:
    if not spec.required and value is None:
        return _ABSENT
    if spec.indirect:
        if not callable(value):
            raise TypeError(
                f"dependency {_describe(spec.key)} must be provided by a function"
            )
        return value
    if isinstance(spec.type, type) and not isinstance(value, spec.type):
        raise TypeError(
            f"dependency {_describe(spec.key)} expects {_describe(spec.type)}, "
            f"got {type(value).__name__}"
        )
    return value if spec.shared else copy.copy(value)


def _extract(target: Spec, source: Spec, stored: Any) -> Any:
    if stored is _ABSENT:
        if target.required:
            raise MissingDependencyError(
                f"missing dependency {_describe(target.key)}"
            )
        return _ABSENT
    if target.indirect and not source.indirect:
        raise TypeError(
            f"dependency {_describe(target.key)} must be provided by a function"
        )
    if source.indirect and not target.indirect:
        return stored()
    return stored


class Deps:
    """An immutable bag of dependencies, each looked up by its key."""

    __slots__ = ("_specs", "_storage")

    def __init__(self) -> None:
        self._specs: dict[Hashable, Spec] = {}
        self._storage: dict[Hashable, Any] = {}

    @classmethod
    def _from_parts(
        cls, specs: dict[Hashable, Spec], storage: dict[Hashable, Any]
    ) -> Deps:
        obj = cls.__new__(cls)
        obj._specs = specs
        obj._storage = storage
        return obj

    @classmethod
    def _pick(cls, targets: Iterable[Any], sources: Iterable[Deps]) -> Deps:
        spec_map = _spec_map(targets)
        available: dict[Hashable, tuple[Spec, Any]] = {}
        for source in sources:
            for k, spec in source._specs.items():
                available[k] = (spec, source._storage[k])
        missing = [
            _describe(spec.key)
            for spec in spec_map.values()
            if spec.required
            and not (spec.key in available and available[spec.key][0].required)
        ]
        if missing:
            raise MissingDependencyError(
                "required dependencies not provided: " + ", ".join(missing)
            )
        storage = {
            k: _extract(spec, *available[k]) if k in available else _ABSENT
            for k, spec in spec_map.items()
        }
        return cls._from_parts(spec_map, storage)

    @classmethod
    def create(cls, specs: Iterable[Any], *args: Any) -> Deps:
        """Build a bag from ``specs`` with one value for each, in order.

        An optional dependency given as ``None`` is left unprovided.
        """
        spec_map = _spec_map(specs)
        if len(args) != len(spec_map):
            raise TypeError("You must provide a value for each specified dependency")
        storage = {
            spec.key: _store(spec, value)
            for spec, value in zip(spec_map.values(), args)
        }
        return cls._from_parts(spec_map, storage)

    @classmethod
    def combine(cls, first: Deps, second: Deps, *args: Any) -> Deps:
        """Build a bag of ``args`` picked from ``first`` and ``second``.

        When both provide a dependency, the one in ``second`` is used.
        """
        return cls._pick(args, (first, second))

    def project(self, *args: Any) -> Deps:
        """Return a bag of the specifications ``args`` picked from this one."""
        return type(self)._pick(args, (self,))

    def merge(self, other: Deps) -> Deps:
        """Return a bag with everything here and in ``other``; ``other`` wins."""
        specs = dict(self._specs)
        specs.update(other._specs)
        return type(self).combine(self, other, *specs.values())

    def _spec(self, k: Hashable) -> Spec:
        try:
            return self._specs[k]
        except KeyError:
            raise KeyError(f"no dependency with key {_describe(k)}") from None

    def get(self, key: Hashable) -> Any:
        """Return the dependency with ``key``."""
        spec = self._spec(key)
        stored = self._storage[key]
        if stored is _ABSENT:
            raise MissingDependencyError("missing dependency in deps")
        return stored() if spec.indirect else stored

    def has(self, key: Hashable) -> bool:
        """Return whether the dependency with ``key`` has been provided."""
        spec = self._spec(key)
        return spec.required or self._storage[key] is not _ABSENT

    @property
    def specs(self) -> tuple[Spec, ...]:
        """The specifications of this bag, in declaration order."""
        return tuple(self._specs.values())

    def __contains__(self, k: object) -> bool:
        return k in self._specs

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        keys = ", ".join(_describe(k) for k in self._specs)
        return f"{type(self).__name__}({keys})"


def make_deps(*args: Any) -> Deps:
    """Return a bag holding each of ``args`` keyed by its type."""
    return Deps.create([val(type(arg)) for arg in args], *args)


def get(d: Deps, key: Hashable) -> Any:
    """Return the dependency with ``key`` from ``d``."""
    return d.get(key)


def has(d: Deps, key: Hashable) -> bool:
    """Return whether ``d`` provides the dependency with ``key``."""
    return d.has(key)


def is_deps(x: Any) -> bool:
    """Return whether ``x`` is a dependency bag."""
    return isinstance(x, Deps)


_ = (Callable, Mapping)