#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import functools

from .Obj import Obj
from .Box import fitsType, typeName
from .Err import AbstractErr, CastErr, ReadonlyErr, UnknownSlotErr, UnresolvedErr


def checkType(name, spec, val, what="value"):
    """Raise CastErr unless val satisfies spec"""
    if spec is not None and not fitsType(spec, val):
        raise CastErr(f"Member '{name}' expects {typeName(spec)}, not {what} {val!r}")
    return val


def returnChecked(name, spec, fn):
    """Wrap fn so its return value is checked against spec"""
    @functools.wraps(fn)
    def checked(*args, **kwargs):
        return checkType(name, spec, fn(*args, **kwargs), "return value")
    return checked


class Slot(Obj):
    """
    Slot is one expanded member living in a domain.

    Slots are created from Boxes when a domain is staged; the Box stays the
    definition and the Slot holds the per-domain state.
    """

    def __init__(self, name, box=None):
        super().__init__()
        self._name = name
        self._box = box

    def name(self):
        return self._name

    def box(self):
        return self._box

    def type(self):
        return self._box.type if self._box is not None else None

    def isWritable(self):
        return False

    def get(self, domain):
        raise NotImplementedError

    def set(self, domain, val):
        raise ReadonlyErr(f"Member '{self._name}' is read-only")

    def toStr(self):
        return f"{type(self).__name__}({self._name})"


class ValueSlot(Slot):
    """Plain value or bound method"""

    def __init__(self, name, box, value, writable):
        super().__init__(name, box)
        self._value = value
        self._writable = writable

    def isWritable(self):
        return self._writable

    def get(self, domain):
        return self._value

    def set(self, domain, val):
        if not self._writable:
            if self._box is not None and self._box.isFinal:
                raise ReadonlyErr(f"Cannot assign Final member '{self._name}'")
            raise ReadonlyErr(f"Member '{self._name}' is read-only")
        self._value = checkType(self._name, self.type(), val)


class AccessorSlot(Slot):
    """Member backed by get/set functions"""

    def __init__(self, name, box, getter, setter):
        super().__init__(name, box)
        self._getter = getter
        self._setter = setter

    def getter(self):
        return self._getter

    def setter(self):
        return self._setter

    def isWritable(self):
        return self._setter is not None

    def get(self, domain):
        if self._getter is None:
            raise UnknownSlotErr(f"Property '{self._name}' is write-only")
        return checkType(self._name, self.type(), self._getter(), "getter result")

    def set(self, domain, val):
        if self._setter is None:
            raise ReadonlyErr(f"Property '{self._name}' has no setter")
        self._setter(checkType(self._name, self.type(), val))


class LinkSlot(Slot):
    """Redirect to the slot of the same member in another domain"""

    def link(self):
        return self._box.value

    def type(self):
        return self.link().type()

    def isWritable(self):
        return not self.link().isFinal()

    def get(self, domain):
        return self.link().get(domain.__meta__.instance())

    def set(self, domain, val):
        self.link().set(domain.__meta__.instance(), val)


class AbstractSlot(Slot):
    """Declared member whose implementation comes from a descendant.

    Reading it dispatches to the nearest implementation found walking from
    the instance's own Class toward the declaring Class.
    """

    def get(self, domain):
        from .Class import ClassInfo
        inst = domain.__meta__.instance()
        info = ClassInfo.of(type(inst), checked=False)
        container = info.container().implementer(self._name) if info is not None else None
        if container is None:
            raise AbstractErr(f"Abstract member '{self._name}' has no implementation")
        impl = container.domains.get(inst)
        if impl is None:
            raise UnresolvedErr(f"Implementation of '{self._name}' in {container.name} is not constructed yet")
        return impl.__meta__.read(self._name)

    def set(self, domain, val):
        raise ReadonlyErr(f"Cannot assign Abstract member '{self._name}'")
