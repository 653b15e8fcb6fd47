import pytest

from classbox import Class, ClassDefErr, ClassInfo, Private, Public, Static


class Greeter:
    greeting = "hi"

    def greet(self, name):
        return f"{self.greeting} {name}"

    @staticmethod
    def helper():
        return "helper"

    def _hidden(self):
        return "hidden"


class LoudGreeter(Greeter):
    greeting = "HI"


def test_python_class_mixin():
    T = Class("T", {"Mixins": [Greeter]})
    t = T()
    assert t.greet("bob") == "hi bob"
    assert t.greeting == "hi"
    assert not hasattr(t, "helper")
    assert not hasattr(t, "_hidden")
    assert ClassInfo.of(T).mixins() == [Greeter]


def test_python_class_mixin_uses_mro():
    T = Class("T", {"Mixins": [LoudGreeter]})
    assert T().greet("amy") == "HI amy"


def test_dict_mixin():
    def inc(self):
        self.count += 1
        return self.count

    T = Class("T", {"Mixins": [{"count": Private(0), "inc": Public(inc)}]})
    t = T()
    assert t.inc() == 1
    assert t.inc() == 2
    with pytest.raises(AttributeError):
        t.count


def test_generated_class_mixin():
    Hello = Class("Hello", {
        "who": Public("world"),
        "hello": Public(lambda self: "hello " + self.who),
        "secret": Private(1),
    })
    T = Class("T", {"Mixins": [Hello]})
    t = T()
    assert t.hello() == "hello world"
    assert not hasattr(t, "secret")
    assert not isinstance(t, Hello)


def test_local_member_shadows_mixin():
    T = Class("T", {"Mixins": [Greeter], "greeting": Public("hey")})
    t = T()
    assert t.greeting == "hey"
    assert t.greet("jo") == "hey jo"


def test_mixin_shadows_ancestor():
    Base = Class("Base", {"name": Public(lambda self: "base")})
    Sub = Class("Sub", {"Extends": Base, "Mixins": [{"name": lambda self: "mixin"}]})
    assert Sub().name() == "mixin"


def test_mixin_state_is_per_instance():
    T = Class("T", {"Mixins": [{"items": Public([])}]})
    a, b = T(), T()
    a.items.append(1)
    assert b.items == []


def test_static_mixin_members():
    T = Class("T", {"Mixins": [{"version": Public(Static("2.0"))}]})
    assert T.version == "2.0"


def test_conflicting_mixins():
    with pytest.raises(ClassDefErr) as e:
        Class({"Mixins": [{"a": 1}, {"b": 2}, {"a": 3}]})
    assert "Mixins[2]" in str(e.value)


def test_bare_function_mixin():
    with pytest.raises(ClassDefErr) as e:
        Class({"Mixins": [lambda self: None]})
    assert "Mixins[0]" in str(e.value)


def test_invalid_mixin():
    with pytest.raises(ClassDefErr):
        Class({"Mixins": [42]})
    with pytest.raises(ClassDefErr):
        Class({"Mixins": [{"Self": 1}]})
