import pytest

from classbox import Box, ClassDefErr, Interface, Privilege, modifyBox
from classbox.Box import accessorsOf, fitsType, isTypeSpec


def test_defaults():
    box = Box(value=42)
    assert box.value == 42
    assert box.privilege is Privilege.None_
    assert box.noPrivilege
    assert not box.isStatic
    assert not box.isFinal
    assert not box.isAbstract
    assert not box.isProperty
    assert not box.isDelegate
    assert box.type is None
    assert not box.isLocked


@pytest.mark.parametrize("flags", [
    {"isProperty": True, "isFinal": True},
    {"isAbstract": True, "isProperty": True},
    {"isAbstract": True, "isFinal": True},
])
def test_exclusive_pairs_at_construction(flags):
    with pytest.raises(ClassDefErr):
        Box(**flags)


@pytest.mark.parametrize("first,second", [
    ("isProperty", "isFinal"),
    ("isFinal", "isProperty"),
    ("isAbstract", "isProperty"),
    ("isProperty", "isAbstract"),
    ("isAbstract", "isFinal"),
    ("isFinal", "isAbstract"),
])
def test_exclusive_pairs_on_set(first, second):
    box = Box()
    setattr(box, first, True)
    with pytest.raises(ClassDefErr) as e:
        setattr(box, second, True)
    # The message names the conflicting pair
    assert first in str(e.value) and second in str(e.value)


def test_privilege_flags():
    box = Box()
    box.isProtected = True
    assert box.isProtected
    assert box.privilege is Privilege.Protected
    box.isProtected = True
    assert box.isProtected

    with pytest.raises(ClassDefErr):
        box.isPublic = True

    box.isProtected = False
    assert box.noPrivilege
    box.isPrivate = True
    assert box.isPrivate


def test_privilege_setter_ignores_link():
    box = Box()
    box.privilege = Privilege.Link
    assert not box.isLink
    box.privilege = Privilege.Public
    assert box.isPublic


def test_lock_makes_sets_silent():
    box = Box(value="x")
    box.isPublic = True
    box.lock()
    box.isPrivate = True
    box.isStatic = True
    box.isFinal = True
    box.privilege = Privilege.Protected
    box.isLocked = False
    assert box.isPublic
    assert not box.isStatic
    assert not box.isFinal
    assert box.isLocked


def test_value_is_readonly():
    box = Box(value=1)
    with pytest.raises(AttributeError):
        box.value = 2


def test_copy_is_unlocked():
    box = Box(isStatic=True, value=[1]).lock()
    dup = box.copy()
    assert not dup.isLocked
    assert dup.isStatic
    assert dup.value is box.value
    assert dup == box


def test_equality():
    val = object()
    assert Box(value=val) == Box(value=val)
    assert Box(value=val) != Box(value=val, isStatic=True)
    assert Box(value=[]) != Box(value=[])


def test_modify_box_wraps_raw_values():
    box = modifyBox(7, {"isStatic": True, "privilege": Privilege.Public}, 7)
    assert isinstance(box, Box)
    assert box.value == 7
    assert box.isStatic and box.isPublic


def test_modify_box_reuses_box():
    box = Box(value=1)
    assert modifyBox(box, {"isFinal": True}) is box
    assert box.isFinal
    assert box.value == 1


def test_modify_box_unknown_attribute():
    with pytest.raises(ClassDefErr):
        modifyBox(1, {"isShiny": True}, 1)


def test_type_checked_at_definition():
    assert Box(type="number", value=3).type == "number"
    with pytest.raises(ClassDefErr):
        Box(type="number", value="three")
    with pytest.raises(ClassDefErr):
        Box(type="not-a-type", value=1)


def test_type_specs():
    assert isTypeSpec(int)
    assert isTypeSpec("string")
    assert isTypeSpec(Interface("I", {}))
    assert not isTypeSpec(3)

    assert fitsType("string", "a")
    assert fitsType("number", 1.5)
    assert not fitsType("number", True)
    assert fitsType("boolean", False)
    assert fitsType("function", len)
    assert not fitsType("function", int)
    assert fitsType(int, None)
    assert fitsType(list, [])
    assert not fitsType(list, ())


def test_accessors_of():
    get = lambda self: 1
    assert accessorsOf({"get": get}) == (get, None)
    assert accessorsOf(property(get)) == (get, None)
    assert accessorsOf({"get": 3}) is None
    assert accessorsOf({}) is None
    assert accessorsOf(5) is None


def test_to_str():
    box = Box(isStatic=True, type=int, value=3)
    box.isPublic = True
    assert str(box) == "Box(Public Static type=int: 3)"
