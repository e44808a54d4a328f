from dataclasses import dataclass, field

import pytest

from tidestate.derive import Trait, derive, hash_combine, members_of


def _point_class():
    @dataclass(eq=False)
    class Point:
        x: int = 0
        y: int = 0

    return Point


def _named_class():
    @dataclass(eq=False)
    class Named:
        name: str = ""
        note: str = field(default="")

    return Named


def _empty_class():
    @dataclass(eq=False)
    class Empty:
        pass

    return Empty


def _item_class():
    class Item:
        def __init__(self, done=False, text=""):
            self.done = done
            self.text = text

    return Item


class Plain:
    pass


def test_eq_compares_members():
    Point = derive(Trait.ALL, "x", "y")(_point_class())
    assert Point(1, 2) == Point(1, 2)
    assert not (Point(1, 2) == Point(2, 1))
    assert Point(1, 2) != Point(1, 3)
    assert not (Point(4, 4) != Point(4, 4))


def test_eq_only_listed_members():
    Named = derive([Trait.EQ], "name")(_named_class())
    assert Named("a", "one") == Named("a", "two")
    assert Named("a") != Named("b")


def test_eq_other_type_is_not_equal():
    Point = derive(Trait.ALL, "x", "y")(_point_class())
    assert (Point(1, 2) == (1, 2)) is False
    assert (Point(1, 2) != (1, 2)) is True


def test_eq_without_hash_is_unhashable():
    Named = derive([Trait.EQ], "name")(_named_class())
    with pytest.raises(TypeError):
        hash(Named("a"))


def test_empty_members_always_equal():
    Empty = derive(Trait.EQ | Trait.HASH)(_empty_class())
    first = Empty()
    second = Empty()
    assert (first == second) is True
    assert (first != second) is False
    assert (first == Plain()) is False
    assert hash(first) == 0
    assert hash(first) == hash(second)


def test_hash_consistent_with_eq():
    Point = derive(Trait.ALL, "x", "y")(_point_class())
    assert hash(Point(3, 7)) == hash(Point(3, 7))
    assert len({Point(1, 2), Point(1, 2), Point(2, 1)}) == 2


def test_hash_combine_pinned_value():
    assert hash_combine(0, 0) == 0x9E3779B9


def test_hash_combine_bounded_and_order_sensitive():
    ab = hash_combine(hash_combine(0, 1), 2)
    ba = hash_combine(hash_combine(0, 2), 1)
    assert 0 <= ab < 2**64
    assert 0 <= ba < 2**64
    assert ab != ba
    assert hash_combine(2**70, "text") < 2**64


def test_members_of_in_order():
    Point = derive(Trait.ALL, "x", "y")(_point_class())
    Item = derive(Trait.HANA | Trait.CEREAL, "done", "text")(_item_class())
    assert members_of(Point(5, 6)) == {"x": 5, "y": 6}
    assert list(members_of(Item(True, "milk"))) == ["done", "text"]


def test_members_of_requires_reflection():
    Named = derive([Trait.EQ], "name")(_named_class())
    with pytest.raises(TypeError):
        members_of(Plain())
    with pytest.raises(TypeError):
        members_of(Named("a"))


def test_archive_round_trip():
    Item = derive(Trait.HANA | Trait.CEREAL, "done", "text")(_item_class())
    Point = derive(Trait.ALL, "x", "y")(_point_class())
    item = Item(True, "buy milk")
    data = item.to_archive()
    assert data == {"done": True, "text": "buy milk"}
    back = Item.from_archive(data)
    assert back.done is True
    assert back.text == "buy milk"
    assert Point.from_archive(Point(8, 9).to_archive()) == Point(8, 9)


def test_archive_missing_member():
    Item = derive(Trait.HANA | Trait.CEREAL, "done", "text")(_item_class())
    with pytest.raises(KeyError):
        Item.from_archive({"done": True})


def test_invalid_member_names():
    with pytest.raises(ValueError):
        derive(Trait.EQ, "a", "a")
    with pytest.raises(ValueError):
        derive(Trait.EQ, "not a name")
    with pytest.raises(ValueError):
        derive(Trait.EQ, "class")
    with pytest.raises(TypeError):
        derive(Trait.EQ, 3)


def test_invalid_traits_and_target():
    Point = derive(Trait.ALL, "x", "y")(_point_class())
    with pytest.raises(TypeError):
        derive(["EQ"], "a")
    with pytest.raises(TypeError):
        derive(Trait.EQ, "a")(Point(1, 2))