import pytest

from classbox import (Abstract, ArgErr, CastErr, Class, ClassDefErr, ClassInfo, Final, Interface,
                      Private, Property, Public, ReadonlyErr, Static, Type)


Named = Interface("Named", {"Properties": {"name": False}})
Runner = Interface("Runner", {
    "Extends": [Named],
    "Properties": {"speed": True},
    "Methods": {"run": 1},
})


def run(self, distance):
    return distance


def test_flattened_tables():
    assert dict(Runner.properties()) == {"speed": True, "name": False}
    assert dict(Runner.methods()) == {"run": 1}
    assert Runner.extends() == [Named]
    assert Runner.name() == "Runner"
    assert str(Runner) == "Interface(Runner)"


def test_inherits_from():
    Sprinter = Interface("Sprinter", {"Extends": [Runner]})
    assert Sprinter.inheritsFrom(Named)
    assert Sprinter.inheritsFrom(Runner)
    assert not Named.inheritsFrom(Runner)


def test_interface_is_immutable():
    with pytest.raises(ReadonlyErr):
        Runner._name = "Walker"
    with pytest.raises(TypeError):
        Runner.methods()["walk"] = 0


def test_same_requirement_in_two_parents_merges():
    A = Interface("A", {"Methods": {"go": 0}})
    B = Interface("B", {"Methods": {"go": 0}})
    assert dict(Interface("C", {"Extends": [A, B]}).methods()) == {"go": 0}


@pytest.mark.parametrize("parents", [
    ({"Methods": {"go": 0}}, {"Methods": {"go": 1}}),
    ({"Properties": {"go": True}}, {"Properties": {"go": False}}),
    ({"Methods": {"go": 0}}, {"Properties": {"go": True}}),
])
def test_conflicting_parents(parents):
    a, b = (Interface(p) for p in parents)
    with pytest.raises(ClassDefErr):
        Interface("C", {"Extends": [a, b]})


@pytest.mark.parametrize("definition", [
    {"Methods": {"go": -1}},
    {"Methods": {"go": True}},
    {"Methods": {"go": "1"}},
    {"Properties": {"x": 1}},
    {"Properties": ["x"]},
    {"Bogus": {}},
    {"Extends": [object()]},
    {"Extends": Named},
])
def test_invalid_definitions(definition):
    with pytest.raises(ClassDefErr):
        Interface("Bad", definition)


def test_derive():
    members = {
        "a": 1,
        "b": Final(2),
        "m": Public(lambda self, x, y: 0),
        "p": Property({"get": lambda self: 1}),
        "rw": property(lambda self: 1, lambda self, v: None),
        "abs": Abstract(),
        "absm": Abstract(lambda self, x: None),
        "s": Static(1),
        "hidden": Private(1),
    }
    iface = Interface.derive("X", members)
    assert iface.name() == "X"
    assert dict(iface.properties()) == {"a": True, "b": False, "p": False, "rw": True}
    assert dict(iface.methods()) == {"m": 2, "absm": 1}


def test_generated_class_conformance():
    Dog = Class("Dog", {"name": Public(Final("rex")), "speed": Public(3), "run": Public(run)})
    assert Runner.isImplementedBy(Dog)
    assert Runner.isImplementedBy(Dog())
    assert ClassInfo.of(Dog).implements(Runner)


def test_private_members_do_not_conform():
    Cat = Class("Cat", {"name": Public("c"), "speed": Public(1), "run": Private(run)})
    assert not Runner.isImplementedBy(Cat)
    assert Named.isImplementedBy(Cat)


def test_readonly_member_does_not_satisfy_writable_property():
    Statue = Class("Statue", {"name": "s", "speed": Public(Final(0)), "run": Public(run)})
    assert not Runner.isImplementedBy(Statue)


def test_arity_must_match():
    Dog = Class("Dog", {"name": "d", "speed": 1, "run": Public(lambda self: 0)})
    assert not Runner.isImplementedBy(Dog)


def test_definition_dict_conformance():
    assert Runner.isImplementedBy({"name": "x", "speed": 1, "run": run})
    assert not Runner.isImplementedBy({"name": "x", "speed": Final(1), "run": run})
    assert not Runner.isImplementedBy({"name": "x", "speed": 1})


def test_plain_object_conformance():
    class Plain:
        speed = 1

        @property
        def name(self):
            return "p"

        def run(self, distance):
            return distance

    class Slow:
        speed = 1
        name = "s"

        def run(self):
            return 0

    assert Runner.isImplementedBy(Plain())
    assert Runner.isImplementedBy(Plain)
    assert not Runner.isImplementedBy(Slow())
    assert not Named.isImplementedBy(object())


def test_none_is_an_argument_error():
    with pytest.raises(ArgErr):
        Runner.isImplementedBy(None)


def test_implements_checked_at_definition():
    Dog = Class("Dog", {"Implements": [Runner], "name": "d", "speed": 1, "run": Public(run)})
    assert ClassInfo.of(Dog).interfaces() == [Runner]
    with pytest.raises(ClassDefErr) as e:
        Class("Lazy", {"Implements": [Named, Runner], "name": "l"})
    assert "Implements[1]" in str(e.value)


def test_inherited_members_conform():
    Base = Class("Base", {"name": "b", "run": Public(run)})
    Sub = Class("Sub", {"Extends": Base, "speed": Public(2)})
    assert Runner.isImplementedBy(Sub)
    assert not Runner.isImplementedBy(Base)


def test_interface_as_type():
    Owner = Class("Owner", {"pet": Public(Type(Named))})
    owner = Owner()
    owner.pet = Class("Pet", {"name": "p"})()
    with pytest.raises(CastErr):
        owner.pet = 5
