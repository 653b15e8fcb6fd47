#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import keyword

from .Obj import Obj


class EnumVal(Obj):
    """
    One named value of an Enum.
    """

    def __init__(self, owner, ordinal, name):
        self._owner = owner
        self._ordinal = ordinal
        self._name = name

    def owner(self):
        """Return the Enum this value belongs to"""
        return self._owner

    def ordinal(self):
        """Return ordinal value"""
        return self._ordinal

    def name(self):
        """Return enum name"""
        return self._name

    def toStr(self):
        return self._name

    def equals(self, other):
        """Enum values are singletons - use identity comparison"""
        return self is other

    def compare(self, other):
        """Compare by ordinal"""
        return self._ordinal - other._ordinal

    def __lt__(self, other):
        return self._ordinal < other._ordinal

    def __le__(self, other):
        return self._ordinal <= other._ordinal

    def __gt__(self, other):
        return self._ordinal > other._ordinal

    def __ge__(self, other):
        return self._ordinal >= other._ordinal

    def __eq__(self, other):
        return self is other

    def __hash__(self):
        return hash((id(self._owner), self._ordinal))


class Enum(Obj):
    """
    Closed set of named constant values.

    Values are reachable as attributes (names that are Python keywords get a
    trailing underscore, so "None" is read as ``Privilege.None_``) and by name
    through fromStr(). The set cannot be extended or modified once built.
    """

    def __init__(self, default, names):
        if isinstance(names, str) or not names:
            from .Err import ArgErr
            raise ArgErr("Enum requires a non-empty list of names")

        vals = []
        byName = {}
        for name in names:
            if not isinstance(name, str) or not name.isidentifier():
                from .Err import ArgErr
                raise ArgErr(f"Invalid enum name: {name!r}")
            if name in byName:
                from .Err import ArgErr
                raise ArgErr(f"Duplicate enum name: {name}")
            val = EnumVal(self, len(vals), name)
            vals.append(val)
            byName[name] = val
            object.__setattr__(self, Enum._attrName(name), val)

        if default not in byName:
            from .Err import ArgErr
            raise ArgErr(f"Default '{default}' is not one of {list(byName)}")

        object.__setattr__(self, "_vals", tuple(vals))
        object.__setattr__(self, "_byName", byName)
        object.__setattr__(self, "_default", byName[default])

    @staticmethod
    def make(default, names):
        """Factory method"""
        return Enum(default, names)

    @staticmethod
    def _attrName(name):
        return name + "_" if keyword.iskeyword(name) else name

    def default(self):
        """Return the default value"""
        return self._default

    def vals(self):
        """Return all values in ordinal order"""
        return list(self._vals)

    def names(self):
        """Return all value names in ordinal order"""
        return [v.name() for v in self._vals]

    def isMember(self, val):
        """Return true if val is one of this Enum's values"""
        return isinstance(val, EnumVal) and val.owner() is self

    def fromStr(self, name, checked=True):
        """Look up a value by name"""
        val = self._byName.get(name)
        if val is not None:
            return val
        if checked:
            from .Err import ArgErr
            raise ArgErr(f"Unknown enum name: {name}")
        return None

    def hash(self):
        return id(self)

    def toStr(self):
        return "Enum(" + ", ".join(self.names()) + ")"

    def __contains__(self, val):
        return self.isMember(val)

    def __iter__(self):
        return iter(self._vals)

    def __len__(self):
        return len(self._vals)

    def __setattr__(self, name, val):
        from .Err import ReadonlyErr
        raise ReadonlyErr(f"Enum is immutable: cannot set '{name}'")

    def __delattr__(self, name):
        from .Err import ReadonlyErr
        raise ReadonlyErr(f"Enum is immutable: cannot delete '{name}'")
