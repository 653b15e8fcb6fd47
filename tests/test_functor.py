import pytest

from classbox import ArgErr, Functor, ReadonlyErr


class Receiver:
    def __init__(self, name):
        self.name = name


def describe(self, suffix=""):
    return self.name + suffix


def test_calls_with_receiver():
    f = Functor(Receiver("a"), describe)
    assert f() == "a"
    assert f("!") == "a!"
    assert f.call("?") == "a?"
    assert f.callList(["."]) == "a."


def test_retarget():
    f = Functor(Receiver("a"), describe)
    f.retarget(Receiver("b"))
    assert f() == "b"
    assert f.callOn(Receiver("c")) == "c"
    assert f() == "b"


def test_fix_freezes_receiver():
    first = Receiver("a")
    f = Functor(first, describe).fix()
    assert f.isFixed()
    f.retarget(Receiver("b"))
    assert f.owner() is first
    with pytest.raises(ReadonlyErr):
        f.extra = 1


def test_rescope_makes_new_functor():
    f = Functor(Receiver("a"), describe).fix()
    g = f.rescope(Receiver("b"))
    assert g is not f
    assert g() == "b"
    assert not g.isFixed()
    assert g.method() is describe


def test_wrapping_a_functor_unwraps_it():
    f = Functor(Receiver("a"), describe)
    assert Functor(Receiver("b"), f).method() is describe


def test_no_receiver():
    f = Functor(None, lambda x, y: x + y)
    assert f(1, 2) == 3


def test_arity():
    assert Functor(Receiver("a"), describe).arity() == 1
    assert Functor.arityOf(lambda self: None) == 0
    assert Functor.arityOf(lambda self, a, b: None) == 2
    assert Functor.arityOf(lambda a, b: None, receiver=False) == 2
    assert Functor.arityOf(lambda self, *args: None) == -1
    assert Functor.arityOf(Receiver("a").__init__) == 1


def test_requires_callable():
    with pytest.raises(ArgErr):
        Functor(None, 3)


def test_keeps_name():
    f = Functor(None, describe)
    assert f.__name__ == "describe"
    assert str(f) == "Functor(describe)"
