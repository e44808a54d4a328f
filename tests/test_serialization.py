import enum
import json
from dataclasses import dataclass, field
from typing import ClassVar, Optional

import pytest

from tidestate.derive import Trait, derive
from tidestate.serialization import (
    Box,
    dumps,
    from_data,
    loads,
    to_camel_case,
    to_data,
)


class Color(enum.Enum):
    RED = 1
    GREEN = 2


@dataclass
class Point:
    x: int = 0
    y: int = 0


@dataclass
class Settings:
    serialize_camel_case: ClassVar[bool] = True
    window_width: int = 0
    dark_mode: bool = False


@dataclass
class Required:
    name: str
    note: Optional[str] = None


@dataclass
class Scene:
    color: Color = Color.RED
    points: list[Point] = field(default_factory=list)
    boxed: tuple[Box[int], ...] = ()


@derive(Trait.EQ | Trait.HANA, "x", "label")
class Tagged:
    x: int
    label: str

    def __init__(self, x: int = 0, label: str = "") -> None:
        self.x = x
        self.label = label


def cerealize(value, cls):
    return loads(dumps(value), cls)


def test_vector_round_trip():
    x = [1, 2, 3, 5, 6]
    assert cerealize(x, list[int]) == x


def test_array_round_trip():
    x = (1, 2, 3, 5, 6)
    assert cerealize(x, tuple[int, ...]) == x


def test_box_round_trip():
    x = Box(42)
    assert cerealize(x, Box[int]) == x


def test_box_layout():
    assert to_data(Box(42)) == {"value": 42}


def test_box_missing_value():
    with pytest.raises(ValueError):
        from_data({}, Box[int])


@pytest.mark.parametrize(
    "name, expected",
    [
        ("foo_bar", "fooBar"),
        ("SCREAMING_CASE", "screamingCase"),
        ("kebab-case-name", "kebabCaseName"),
        ("value2_x", "value2X"),
        ("_private", "Private"),
        ("plain", "plain"),
    ],
)
def test_to_camel_case(name, expected):
    assert to_camel_case(name) == expected


def test_camel_case_struct():
    data = to_data(Settings(window_width=800, dark_mode=True))
    assert data == {"windowWidth": 800, "darkMode": True}
    assert from_data(data, Settings) == Settings(800, True)


def test_plain_struct_keeps_names():
    assert to_data(Point(1, 2)) == {"x": 1, "y": 2}


def test_enum_by_name():
    assert to_data(Color.GREEN) == "GREEN"
    assert from_data("RED", Color) is Color.RED


def test_enum_unknown_name():
    with pytest.raises(ValueError):
        from_data("PURPLE", Color)


def test_set_round_trip():
    x = {3, 1, 2}
    assert to_data(x) == [1, 2, 3]
    assert cerealize(x, set[int]) == x


def test_set_duplicates_rejected():
    with pytest.raises(ValueError, match="duplicate"):
        from_data([1, 1, 2], set[int])


def test_nested_round_trip():
    scene = Scene(Color.GREEN, [Point(1, 2), Point(3, 4)], (Box(7), Box(8)))
    assert cerealize(scene, Scene) == scene


def test_missing_member_uses_default():
    assert from_data({"x": 5}, Point) == Point(5, 0)


def test_missing_required_member():
    with pytest.raises(ValueError):
        from_data({}, Required)


def test_optional_member():
    assert from_data({"name": "a", "note": None}, Required) == Required("a", None)
    assert from_data({"name": "a", "note": "n"}, Required) == Required("a", "n")


def test_derived_struct_round_trip():
    value = Tagged(3, "three")
    assert to_data(value) == {"x": 3, "label": "three"}
    assert cerealize(value, Tagged) == value


def test_type_mismatch():
    with pytest.raises(ValueError):
        from_data("1", int)
    with pytest.raises(ValueError):
        from_data(True, int)


def test_float_accepts_int():
    assert from_data(3, float) == 3.0


def test_tuple_fixed_length():
    assert from_data([42, 12.0], tuple[int, float]) == (42, 12.0)
    with pytest.raises(ValueError):
        from_data([42], tuple[int, float])


def test_unserializable_value():
    with pytest.raises(TypeError):
        to_data(object())


def test_dumps_is_json():
    assert json.loads(dumps(Point(1, 2))) == {"x": 1, "y": 2}


def test_dict_round_trip():
    x = {"a": [1], "b": [2, 3]}
    assert cerealize(x, dict[str, list[int]]) == x