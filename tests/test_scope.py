import pytest

from classbox import (Box, ClassDefErr, Env, Final, Functor, Private, Property, Protected, Public,
                      ReadonlyErr, ScopeContainer, ScopeNode, Static, expandScope, populateScopes)
from classbox.Link import Link, resolveBox
from classbox.Slot import AccessorSlot, LinkSlot, ValueSlot


class Target:
    pass


def method(self):
    return self


def make_container():
    container = ScopeContainer("Sample")
    populateScopes(container, {
        "secret": Private(1),
        "shared": Protected(2),
        "open": Public(3),
        "plain": Box(value=4),
        "counter": Private(Static(0)),
        "version": Public(Static("1.0")),
        "run": Public(method),
    })
    return container


def test_node_chain_lookup():
    parent = ScopeNode("parent")
    child = ScopeNode("child", parent)
    parent.set("a", Box(value=1))
    parent.set("b", Box(value=2))
    child.set("a", Box(value=3))

    assert child.get("a").value == 3
    assert child.get("b").value == 2
    assert child.own("b") is None
    assert child.get("c") is None
    assert child.has("b")
    assert child.names() == ["a", "b"]
    assert [node.name() for node in child.nodes()] == ["child", "parent"]


def test_frozen_node():
    node = ScopeNode("n").freeze()
    with pytest.raises(ReadonlyErr):
        node.set("a", Box())
    with pytest.raises(ReadonlyErr):
        node.setParent(ScopeNode("p"))


def test_populate_partitions_members():
    c = make_container()
    assert sorted(c.private.keys()) == ["open", "plain", "run", "secret", "shared"]
    assert sorted(c.protected.keys()) == ["open", "plain", "run", "shared"]
    assert sorted(c.public.keys()) == ["open", "plain", "run"]
    assert sorted(c.static.keys()) == ["counter", "version"]
    assert c.protectedStatic.keys() == ["version"]
    assert c.publicStatic.keys() == ["version"]


def test_populate_links_back_to_storage():
    c = make_container()
    link = c.public.own("open")
    assert link.isLink
    assert link.isProperty
    assert isinstance(link.value, Link)
    assert link.value.source() is c
    assert resolveBox(link) is c.private.own("open")
    assert resolveBox(c.publicStatic.own("version")) is c.static.own("version")


def test_populate_defaults_to_public_and_locks():
    c = make_container()
    plain = c.private.own("plain")
    assert plain.isPublic
    assert plain.isLocked


@pytest.mark.parametrize("box", [
    lambda: Private(Box(isAbstract=True)),
    lambda: Public(Static(Box(isAbstract=True))),
])
def test_populate_rejects_private_or_static_abstract(box):
    with pytest.raises(ClassDefErr):
        populateScopes(ScopeContainer("Bad"), {"m": box()})


def test_expand_values_and_methods():
    c = make_container()
    target = Target()
    slots = expandScope({}, c.private, target)

    assert isinstance(slots["secret"], ValueSlot)
    assert slots["secret"].get(target) == 1
    assert slots["secret"].isWritable()

    run = slots["run"].get(target)
    assert isinstance(run, Functor)
    assert run() is target
    assert not slots["run"].isWritable()
    with pytest.raises(ReadonlyErr):
        slots["run"].set(target, None)


def test_expand_skips_existing_names():
    c = make_container()
    existing = ValueSlot("secret", None, "mine", True)
    slots = expandScope({"secret": existing}, c.private, Target())
    assert slots["secret"] is existing


def test_expand_links():
    c = make_container()
    slots = expandScope({}, c.public, Target())
    assert all(isinstance(slot, LinkSlot) for slot in slots.values())


def test_expand_final_is_readonly():
    c = ScopeContainer("F")
    populateScopes(c, {"k": Final(1)})
    slot = expandScope({}, c.private, Target())["k"]
    with pytest.raises(ReadonlyErr):
        slot.set(None, 2)


def test_expand_accessors():
    c = ScopeContainer("P")
    populateScopes(c, {"doubled": Property({"get": lambda self: self.value * 2})})
    target = Target()
    target.value = 4
    slot = expandScope({}, c.private, target)["doubled"]
    assert isinstance(slot, AccessorSlot)
    assert slot.get(target) == 8
    with pytest.raises(ReadonlyErr):
        slot.set(target, 1)


def test_expand_delegates_are_fixed():
    c = ScopeContainer("D")
    populateScopes(c, {"cb": Public(Box(isDelegate=True, value=method))})
    slot = expandScope({}, c.private, Target())["cb"]
    assert slot.get(None).isFixed()


def test_expand_without_context():
    c = ScopeContainer("N")
    populateScopes(c, {"run": Public(lambda: "free")})
    slot = expandScope({}, c.private, Target(), addContext=False)["run"]
    assert slot.get(None)() == "free"


def test_mutable_defaults_are_copied():
    c = ScopeContainer("M")
    populateScopes(c, {"items": Public([])})
    first = expandScope({}, c.private, Target())["items"].get(None)
    second = expandScope({}, c.private, Target())["items"].get(None)
    assert first == [] and first is not second

    Env.cur().setConfig("copyMutableDefaults", False)
    third = expandScope({}, c.private, Target())["items"].get(None)
    assert third is c.private.own("items").value


def test_container_freeze():
    c = make_container().freeze()
    assert c.isFrozen()
    with pytest.raises(ReadonlyErr):
        c.public.set("x", Box())
    with pytest.raises(ReadonlyErr):
        c.mixins.public.set("x", Box())
