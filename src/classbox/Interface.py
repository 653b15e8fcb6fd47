#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import inspect
from types import MappingProxyType

from .Obj import Obj
from .Box import Box, accessorsOf, isMethodValue
from .Err import ArgErr, ClassDefErr
from .Functor import Functor


class Interface(Obj):
    """
    Interface is a structural contract: named Properties (with whether they
    must be writable) and named Methods (with their arity).

    Definition::

        Interface("Runner", {
            "Extends": [Named],
            "Properties": {"speed": True},
            "Methods": {"run": 0},
        })

    Parents listed in Extends are merged at construction; a name declared
    with different requirements by two parents is a ClassDefErr.
    """

    _KEYS = ("Extends", "Properties", "Methods")

    def __init__(self, name=None, definition=None):
        super().__init__()
        if definition is None and not isinstance(name, str) and name is not None:
            name, definition = None, name
        if definition is None:
            definition = {}
        if not isinstance(definition, dict):
            raise ClassDefErr("Interface definition must be a dict")
        for key in definition:
            if key not in Interface._KEYS:
                raise ClassDefErr(f"Interface: unknown definition key '{key}'")

        self._name = name or "Interface"
        self._extends = tuple(Interface._checkExtends(definition.get("Extends")))
        self._ownProperties = Interface._checkTable(definition.get("Properties"), "Properties", bool)
        self._ownMethods = Interface._checkTable(definition.get("Methods"), "Methods", int)

        properties = {}
        methods = {}
        Interface._merge(properties, methods, self._ownProperties, self._ownMethods)
        for parent in self._extends:
            Interface._merge(properties, methods, parent._properties, parent._methods)
        self._properties = MappingProxyType(properties)
        self._methods = MappingProxyType(methods)

    @staticmethod
    def make(name=None, definition=None):
        """Factory method"""
        return Interface(name, definition)

    @staticmethod
    def _checkExtends(extends):
        if extends is None:
            return []
        if not isinstance(extends, list):
            raise ClassDefErr("Extends must be a list of Interface objects if defined!")
        for i, parent in enumerate(extends):
            if not isinstance(parent, Interface):
                raise ClassDefErr(f"Extends[{i}]: Interfaces can only inherit from Interfaces!")
        return extends

    @staticmethod
    def _checkTable(table, key, kind):
        if table is None:
            return {}
        if not isinstance(table, dict):
            raise ClassDefErr(f"{key} must be a dict")
        for name, val in table.items():
            if not isinstance(name, str) or not name.isidentifier():
                raise ClassDefErr(f"{key}: invalid member name {name!r}")
            if kind is int and (isinstance(val, bool) or not isinstance(val, int) or val < 0):
                raise ClassDefErr(f"{key}.{name}: arity must be a non-negative int")
            if kind is bool and not isinstance(val, bool):
                raise ClassDefErr(f"{key}.{name}: writable flag must be a bool")
        return dict(table)

    @staticmethod
    def _merge(properties, methods, newProps, newMethods):
        for name, writable in newProps.items():
            if name in methods or properties.get(name, writable) != writable:
                raise ClassDefErr(f"Conflicting definitions for property '{name}'!")
            properties[name] = writable
        for name, arity in newMethods.items():
            if name in properties or methods.get(name, arity) != arity:
                raise ClassDefErr(f"Conflicting definitions for method '{name}'!")
            methods[name] = arity

    #################################################################
    # Identity
    #################################################################

    def name(self):
        return self._name

    def extends(self):
        """Parent interfaces, as declared"""
        return list(self._extends)

    def properties(self):
        """Flattened property table: name -> must be writable"""
        return self._properties

    def methods(self):
        """Flattened method table: name -> arity"""
        return self._methods

    def inheritsFrom(self, iface):
        """True if iface is an ancestor of this interface"""
        for parent in self._extends:
            if parent is iface or parent.inheritsFrom(iface):
                return True
        return False

    def toStr(self):
        return f"Interface({self._name})"

    def __setattr__(self, name, val):
        if name.startswith("_") and not hasattr(self, "_methods"):
            object.__setattr__(self, name, val)
            return
        from .Err import ReadonlyErr
        raise ReadonlyErr(f"Interface is immutable: cannot set '{name}'")

    #################################################################
    # Derivation
    #################################################################

    @staticmethod
    def derive(name, members):
        """Build the Interface of a public member table (name -> Box or value).

        Properties are keyed by whether a setter exists; plain non-Final
        values count as writable properties. Methods are keyed by arity,
        not counting the receiver. Private, Protected and static members,
        and Abstract members without a function placeholder, are left out.
        """
        properties = {}
        methods = {}
        for key, val in members.items():
            kind = Interface._describe(val)
            if kind is None:
                continue
            if kind[0] == "property":
                properties[key] = kind[1]
            else:
                methods[key] = kind[1]
        return Interface(name, {"Properties": properties, "Methods": methods})

    @staticmethod
    def _describe(val):
        """("property", writable) or ("method", arity) for a public member, else None"""
        if isinstance(val, Box):
            box = val
        else:
            box = Box(isProperty=isinstance(val, property), value=val)
        if box.isStatic or box.isPrivate or box.isProtected:
            return None
        if box.isProperty:
            getter, setter = accessorsOf(box.value)
            if getter is None:
                return None
            return ("property", setter is not None)
        if isMethodValue(box.value):
            fn = box.value.method() if isinstance(box.value, Functor) else box.value
            return ("method", Functor.arityOf(fn))
        if box.isAbstract:
            return None
        return ("property", not box.isFinal)

    #################################################################
    # Conformance
    #################################################################

    def isImplementedBy(self, obj):
        """True if obj meets every Property and Method of this interface.

        obj may be a class definition dict, a generated Class or instance,
        or any other object, which is inspected through its attributes.
        """
        if obj is None:
            raise ArgErr("The object potentially implementing this interface cannot be None!")

        from .Class import ClassInfo
        if isinstance(obj, dict):
            return self._conforms(lambda name: Interface._describeKey(obj, name))

        info = ClassInfo.of(obj if isinstance(obj, type) else type(obj), checked=False)
        if info is not None:
            derived = info.interface()
            return self._conforms(lambda name: Interface._lookup(derived, name))

        return self._conforms(lambda name: Interface._describeAttr(obj, name))

    def _conforms(self, describe):
        for name, writable in self._properties.items():
            kind = describe(name)
            if kind is None or kind[0] != "property" or (writable and not kind[1]):
                return False
        for name, arity in self._methods.items():
            kind = describe(name)
            if kind is None or kind[0] != "method" or kind[1] != arity:
                return False
        return True

    @staticmethod
    def _describeKey(definition, name):
        if name not in definition:
            return None
        return Interface._describe(definition[name])

    @staticmethod
    def _lookup(derived, name):
        if name in derived._properties:
            return ("property", derived._properties[name])
        if name in derived._methods:
            return ("method", derived._methods[name])
        return None

    @staticmethod
    def _describeAttr(obj, name):
        if name.startswith("_"):
            return None
        cls = obj if isinstance(obj, type) else type(obj)
        for klass in cls.__mro__:
            attr = vars(klass).get(name)
            if isinstance(attr, property):
                if attr.fget is None:
                    return None
                return ("property", attr.fset is not None)
            if attr is not None:
                break
        try:
            val = getattr(obj, name)
        except AttributeError:
            return None
        if callable(val) and not isinstance(val, type):
            receiver = isinstance(obj, type) and inspect.isfunction(val)
            return ("method", Functor.arityOf(val, receiver=receiver))
        return ("property", True)
