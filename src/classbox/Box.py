#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import types

from .Obj import Obj
from .Privilege import Privilege
from .Err import ClassDefErr


# Names accepted as type specifiers, mapped to the Python types they admit
_NAMED_TYPES = {
    "string": (str,),
    "str": (str,),
    "number": (int, float),
    "int": (int,),
    "float": (float, int),
    "boolean": (bool,),
    "bool": (bool,),
}


def isTypeSpec(spec):
    """Return true if spec can be used as a Type constraint."""
    from .Interface import Interface
    if isinstance(spec, Interface):
        return True
    if isinstance(spec, type):
        return True
    if isinstance(spec, str):
        return spec.lower() in _NAMED_TYPES or spec.lower() == "function"
    return False


def fitsType(spec, val):
    """Return true if val satisfies the Type constraint spec. None always fits."""
    if val is None or spec is None:
        return True
    from .Interface import Interface
    if isinstance(spec, Interface):
        return spec.isImplementedBy(val)
    if isinstance(spec, str):
        name = spec.lower()
        if name == "function":
            return callable(val) and not isinstance(val, type)
        allowed = _NAMED_TYPES.get(name)
        if allowed is None:
            return False
        # bool is an int subclass; numbers never accept it
        if isinstance(val, bool) and bool not in allowed:
            return False
        return isinstance(val, allowed)
    if spec is types.FunctionType:
        return callable(val) and not isinstance(val, type)
    return isinstance(val, spec)


def typeName(spec):
    """Printable name of a type specifier."""
    if spec is None:
        return "<unknown>"
    if isinstance(spec, str):
        return spec
    name = getattr(spec, "__name__", None)
    if name is None and hasattr(spec, "name"):
        name = spec.name()
    return name or repr(spec)


def isMethodValue(val):
    """True for payloads that are rebound to a receiver when expanded."""
    from .Functor import Functor
    return isinstance(val, (types.FunctionType, Functor))


def accessorsOf(val):
    """Return (get, set) for a Property payload, or None if val has neither.

    A payload is either a mapping with "get"/"set" entries or a builtin
    ``property`` object.
    """
    if isinstance(val, property):
        getter, setter = val.fget, val.fset
    elif isinstance(val, dict):
        getter, setter = val.get("get"), val.get("set")
    else:
        return None
    if getter is not None and not callable(getter):
        return None
    if setter is not None and not callable(setter):
        return None
    if getter is None and setter is None:
        return None
    return getter, setter


class Box(Obj):
    """Box - The metadata object describing one member of a defined Class.

    Args:
        privilege: The Privilege for this member (None means unmarked).
        isFinal: Can it be overridden or changed?
        isAbstract: Must it be overridden to be used?
        isStatic: Is it owned by the Class type?
        isProperty: Is it backed by accessor functions?
        isDelegate: Is it always called with its defining scope as receiver?
        type: The type specifier values of this member must satisfy.
        value: The payload - a value, a function, or an accessor pair.

    Once locked, every flag and privilege assignment is silently ignored.
    """

    _PROPERTY_FINAL = "Isn't this self-contradicting? A 'Final' Property cannot exist (isProperty, isFinal)"
    _ABSTRACT_PROPERTY = "An 'Abstract' Property has nothing to override (isAbstract, isProperty)"
    _ABSTRACT_FINAL = "Make up your mind: define it now ('Final') or later ('Abstract') (isAbstract, isFinal)"

    def __init__(self, privilege=None, isFinal=False, isAbstract=False, isStatic=False,
                 isProperty=False, isDelegate=False, type=None, value=None):
        super().__init__()
        if privilege is None:
            privilege = Privilege.None_
        if not Privilege.isMember(privilege):
            raise ClassDefErr(f"Invalid privilege: {privilege!r}")

        self._privilege = privilege
        self._isFinal = bool(isFinal)
        self._isAbstract = bool(isAbstract)
        self._isStatic = bool(isStatic)
        self._isProperty = bool(isProperty)
        self._isDelegate = bool(isDelegate)
        self._type = None
        self._value = value
        self._isLocked = False

        if self._isProperty and self._isFinal:
            raise ClassDefErr(Box._PROPERTY_FINAL)
        if self._isAbstract and self._isProperty:
            raise ClassDefErr(Box._ABSTRACT_PROPERTY)
        if self._isAbstract and self._isFinal:
            raise ClassDefErr(Box._ABSTRACT_FINAL)

        if type is not None:
            self.type = type

    @staticmethod
    def make(**params):
        """Factory method"""
        return Box(**params)

    def copy(self):
        """Return an unlocked Box with the same attributes and payload."""
        box = Box(privilege=self._privilege if self._privilege is not Privilege.Link else None,
                  isFinal=self._isFinal, isAbstract=self._isAbstract, isStatic=self._isStatic,
                  isProperty=self._isProperty, isDelegate=self._isDelegate, value=self._value)
        box._type = self._type
        if self._privilege is Privilege.Link:
            box._privilege = Privilege.Link
        return box

    #################################################################
    # Lock
    #################################################################

    @property
    def isLocked(self):
        return self._isLocked

    @isLocked.setter
    def isLocked(self, val):
        # Once locked, the box cannot be unlocked
        if val:
            self._isLocked = True

    def lock(self):
        self._isLocked = True
        return self

    #################################################################
    # Privilege
    #################################################################

    @property
    def privilege(self):
        return self._privilege

    @privilege.setter
    def privilege(self, val):
        if self._isLocked:
            return
        if Privilege.isMember(val) and val is not Privilege.Link:
            self._privilege = val

    @property
    def noPrivilege(self):
        return self._privilege is Privilege.None_

    @property
    def isLink(self):
        return self._privilege is Privilege.Link

    @isLink.setter
    def isLink(self, val):
        if self._isLocked:
            return
        if val:
            self._privilege = Privilege.Link
        elif self._privilege is Privilege.Link:
            self._privilege = Privilege.None_

    def _setPrivilegeFlag(self, priv, val):
        if self._isLocked:
            return
        if val:
            if self._privilege is priv:
                return
            if self._privilege is Privilege.None_:
                self._privilege = priv
            else:
                raise ClassDefErr(f"Member cannot be both '{priv.name()}' and "
                                  f"'{self._privilege.name()}' at the same time!")
        elif self._privilege is priv:
            self._privilege = Privilege.None_

    @property
    def isPrivate(self):
        return self._privilege is Privilege.Private

    @isPrivate.setter
    def isPrivate(self, val):
        self._setPrivilegeFlag(Privilege.Private, val)

    @property
    def isProtected(self):
        return self._privilege is Privilege.Protected

    @isProtected.setter
    def isProtected(self, val):
        self._setPrivilegeFlag(Privilege.Protected, val)

    @property
    def isPublic(self):
        return self._privilege is Privilege.Public

    @isPublic.setter
    def isPublic(self, val):
        self._setPrivilegeFlag(Privilege.Public, val)

    #################################################################
    # Flags
    #################################################################

    @property
    def isStatic(self):
        return self._isStatic

    @isStatic.setter
    def isStatic(self, val):
        if not self._isLocked:
            self._isStatic = bool(val)

    @property
    def isFinal(self):
        return self._isFinal

    @isFinal.setter
    def isFinal(self, val):
        if self._isLocked:
            return
        if val:
            if self._isProperty:
                raise ClassDefErr(Box._PROPERTY_FINAL)
            if self._isAbstract:
                raise ClassDefErr(Box._ABSTRACT_FINAL)
        self._isFinal = bool(val)

    @property
    def isAbstract(self):
        return self._isAbstract

    @isAbstract.setter
    def isAbstract(self, val):
        if self._isLocked:
            return
        if val:
            if self._isProperty:
                raise ClassDefErr(Box._ABSTRACT_PROPERTY)
            if self._isFinal:
                raise ClassDefErr(Box._ABSTRACT_FINAL)
        self._isAbstract = bool(val)

    @property
    def isProperty(self):
        return self._isProperty

    @isProperty.setter
    def isProperty(self, val):
        if self._isLocked:
            return
        if val:
            if self._isFinal:
                raise ClassDefErr(Box._PROPERTY_FINAL)
            if self._isAbstract:
                raise ClassDefErr(Box._ABSTRACT_PROPERTY)
        self._isProperty = bool(val)

    @property
    def isDelegate(self):
        return self._isDelegate

    @isDelegate.setter
    def isDelegate(self, val):
        if not self._isLocked:
            self._isDelegate = bool(val)

    @property
    def type(self):
        return self._type

    @type.setter
    def type(self, val):
        if self._isLocked:
            return
        if val is not None and not isTypeSpec(val):
            raise ClassDefErr("Type must reference either a Class, an Interface, or an intrinsic type!")
        # Accessors and methods are checked when called, plain values right away
        if not self._isProperty and not isMethodValue(self._value) and not fitsType(val, self._value):
            raise ClassDefErr(f"Failed to match type '{typeName(val)}' to value {self._value!r}!")
        self._type = val

    @property
    def value(self):
        return self._value

    #################################################################
    # Obj
    #################################################################

    def equals(self, that):
        """Boxes are equal when every attribute matches and the payload is the same object"""
        if not isinstance(that, Box):
            return False
        return (self._privilege is that._privilege and
                self._isFinal == that._isFinal and
                self._isAbstract == that._isAbstract and
                self._isStatic == that._isStatic and
                self._isProperty == that._isProperty and
                self._isDelegate == that._isDelegate and
                self._type is that._type and
                self._value is that._value)

    def __hash__(self):
        return id(self)

    def toStr(self):
        flags = [self._privilege.name()]
        for name in ("isStatic", "isFinal", "isAbstract", "isProperty", "isDelegate"):
            if getattr(self, name):
                flags.append(name[2:])
        if self._type is not None:
            flags.append(f"type={typeName(self._type)}")
        return f"Box({' '.join(flags)}: {self._value!r})"


def modifyBox(box, params, val=None):
    """Return box (or a new Box around val) with params applied.

    Each parameter goes through the matching Box setter, so conflicting
    modifiers raise ClassDefErr and a locked box ignores them. The payload is
    never changed.
    """
    if not isinstance(box, Box):
        box = Box(value=val)

    for key, v in params.items():
        if key == "value":
            continue
        if key == "privilege":
            # Route through the flag setters so conflicts are detected
            if v is Privilege.Public:
                box.isPublic = True
            elif v is Privilege.Protected:
                box.isProtected = True
            elif v is Privilege.Private:
                box.isPrivate = True
            else:
                box.privilege = v
        elif hasattr(Box, key) and isinstance(getattr(Box, key), property):
            setattr(box, key, v)
        else:
            raise ClassDefErr(f"Unknown Box attribute: {key}")

    return box
