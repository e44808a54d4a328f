# tidestate

Small building blocks for applications built around a single immutable
model, pure update functions and effects that are plain callables. It has no
dependencies outside the standard library.

## Modules

### `tidestate.derive`

`derive(traits, *args)` is a class decorator. It generates behaviour from a
list of member names. `traits` is a `Trait` flag or an iterable of them:

- `Trait.EQ`: member-wise `==` and `!=` between instances of the same class.
  If `HASH` is not also selected, the class is made unhashable.
- `Trait.HASH`: `__hash__` built by folding each member's hash through
  `hash_combine(seed, value)`, which returns a 64-bit seed.
- `Trait.HANA`: member reflection. `members_of(obj)` returns the members as a
  dict in declaration order, and raises `TypeError` for classes without it.
- `Trait.CEREAL`: `obj.to_archive()` returns the members as a dict, and
  `Cls.from_archive(mapping)` builds an instance from one. It raises
  `KeyError` if a member is missing.
- `Trait.ALL`: all of the above.

Member names must be unique, valid identifiers.

```python
from dataclasses import dataclass
from tidestate.derive import Trait, derive, members_of

@derive(Trait.EQ | Trait.HASH | Trait.HANA, "x", "y")
@dataclass(eq=False)
class Point:
    x: int = 0
    y: int = 0

members_of(Point(1, 2))   # {'x': 1, 'y': 2}
```

### `tidestate.serialization`

- `to_data(value)` turns a value into JSON-ready data. Dataclasses, classes
  reflected by `derive`, and objects with `to_archive()` become objects keyed
  by member name. Enums are written by name. Lists and tuples become lists.
  Sets become lists, sorted where the items allow it. `Box(value)` becomes
  `{"value": ...}`. Mappings must have string keys.
- `from_data(data, cls)` builds a value of type `cls`. `cls` may be a scalar
  type, an enum, `list[...]`, `tuple[...]`, `set[...]`, `frozenset[...]`,
  `dict[str, ...]`, `Box[...]`, a `Union` or `X | None`, a dataclass, or an
  annotated class. Mismatched data raises `ValueError`. A set whose data holds
  duplicates raises `ValueError`. Dataclass members without defaults must be
  present.
- `dumps(value)` and `loads(text, cls)` do the same with JSON text. Output is
  indented by four spaces.
- `to_camel_case(name)` converts `snake_case`, `SCREAMING_CASE` and
  `kebab-case` to `camelCase`. A class that sets
  `serialize_camel_case = True` has its member names camel-cased in both
  directions.

### `tidestate.deps`

`Deps` is an immutable bag of dependencies looked up by key. Each one is
described by a `Spec`, built with:

- `val(t)`: keyed by `t`, stored as a shallow copy.
- `ref(t)`: keyed by `t`, held by reference.
- `opt(t)`: optional. `None` passed to `Deps.create` leaves it unprovided.
- `fn(t)`: provided by a function that is called on each `get`.
- `key(k, t)`: the same spec under key `k`.
- `to_spec(t)`: returns `t` if it is already a spec, otherwise `val(t)`.

Where the spec's type is a class, values are type-checked.

- `Deps.create(specs, *args)` takes one value per spec, in order. Duplicate
  keys raise `ValueError`.
- `d.project(*specs)` returns a narrower bag. It raises
  `MissingDependencyError` if a required target is not required in `d`.
- `Deps.combine(first, second, *specs)` picks from both bags. `second` wins
  when both provide a dependency.
- `d.merge(other)` keeps everything from both bags. `other` wins.
- `d.get(key)` returns the dependency. It raises `MissingDependencyError` for
  an unprovided optional one, and `KeyError` for an unknown key.
- `d.has(key)` is always true for required dependencies.
- `d.specs`, `key in d`, `iter(d)` and `len(d)` describe the bag.

`make_deps(*args)` keys each value by its type. `get(d, key)`, `has(d, key)`
and `is_deps(x)` are free-standing helpers.

```python
from tidestate.deps import Deps, key, opt, ref

class Database: ...
class Logger: ...
class UserDb: ...

db, log = Database(), Logger()
root = Deps.create([key(UserDb, ref(Database)), ref(Logger)], db, log)
part = root.project(key(UserDb, ref(Database)), opt(ref(Logger)))
assert part.get(UserDb) is db and part.has(Logger)
```

### `tidestate.debugger`

`update(reducer, model, action)` wraps any reducer with a time-travel
history. It returns `(DebuggerModel, effect)`.

- `DebuggerModel` holds `init`, `cursor`, `paused`, `history` (a tuple of
  `Step(action, model)`) and `pending`. `lookup(cursor)` returns
  `(action, model)`; position 0 is `(None, init)`, and positions out of range
  raise `IndexError`. `summary()` is the history length. `current()` is the
  model at the cursor.
- Any action that is not one of the debugger's own goes to the reducer. The
  reducer may return a model or a `(model, effect)` pair. History after the
  cursor is discarded, the step is appended and the cursor moves to the end.
  While paused, the action is queued instead.
- `GotoAction(cursor)` moves the cursor if the position is in range.
  `UndoAction()` and `RedoAction()` step it back and forward within bounds.
- `PauseAction()` pauses and returns an effect calling `ctx.loop.pause()`.
- `ResumeAction()` applies the queued actions in order. Its effect calls
  `ctx.loop.resume()` and then the effects of the queued actions.
- `noop` is the empty effect. `sequence(*effects)` runs effects in order.

### `tidestate.todo`

This module is a small example application.

- `Item(done, text)` is a to-do entry, and `TodoModel(todos)` holds a tuple
  of them.
- `update_item(item, action)` handles `ToggleItemAction` and
  `RemoveItemAction`.
- `update_model(model, action)` handles two kinds of action:
  - `AddTodoAction(text)` adds a new item at the front. Empty text is ignored.
  - `(index, item_action)` toggles or removes the item at `index`. An index
    out of range is logged as an error and leaves the model unchanged.
- `save(fname, model)` writes the model as JSON, and `load(fname)` reads it
  back.

```python
from tidestate.todo import AddTodoAction, TodoModel, ToggleItemAction, load, save, update_model

model = TodoModel()
model = update_model(model, AddTodoAction("write docs"))
model = update_model(model, (0, ToggleItemAction()))
save("todos.json", model)
assert load("todos.json") == model
```

## What it does not do

tidestate has no store and no event loop. Nothing dispatches actions, runs
effects or notifies watchers for you. You call the reducers and
`debugger.update` yourself, and you run the effects they return with a context
of your own. The `ctx.loop` used by the debugger's pause and resume effects
must be supplied by that context. There is no user interface for the to-do
example and no viewer for the debugger's history.

## Tests

```
pip install -e .[test]
pytest
```