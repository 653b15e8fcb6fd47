#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from types import MappingProxyType

from .Obj import Obj
from .Box import Box
from .Composer import Composer
from .Constructor import Constructor
from .Domain import createStaticDomain
from .Enum import Enum
from .Err import CastErr, ClassDefErr, ReadonlyErr, UnknownSlotErr, UnresolvedErr, ConstructErr
from .Functor import Functor
from .Interface import Interface
from .Log import Log
from .Modifiers import Abstract, Delegate, Final, Private, Property, Protected, Public, Static, Type
from .Privilege import Modes, Privilege
from .Scope import ScopeContainer, populateScopes


# Marks a namespace built by Class; class statements never carry it
_GENERATED = object()


#################################################################
# Metadata
#################################################################

class ClassInfo(Obj):
    """
    ClassInfo is the frozen metadata of one generated Class.

    Reached through ``ClassInfo.of(cls)``.
    """

    def __init__(self, name, mode, container, constructor=None, staticConstructor=None,
                 base=None, mixins=(), interfaces=(), events=None, definition=None):
        super().__init__()
        self._name = name
        self._mode = mode
        self._container = container
        self._constructor = constructor
        self._staticConstructor = staticConstructor
        self._base = base
        self._mixins = tuple(mixins)
        self._interfaces = tuple(interfaces)
        self._events = events
        self._definition = MappingProxyType(dict(definition or {}))
        self._type = None
        self._interface = None
        self._frozen = False

    @staticmethod
    def of(cls, checked=True):
        """Metadata of a generated Class, or None/CastErr for anything else"""
        info = vars(cls).get("__classinfo__") if isinstance(cls, type) else None
        if info is None and checked:
            raise CastErr(f"{cls!r} is not a generated Class")
        return info

    def _attach(self, cls):
        self._type = cls
        self._interface = Interface.derive(self._name, self.publicMembers())
        self._frozen = True

    def __setattr__(self, name, val):
        if getattr(self, "_frozen", False):
            raise ReadonlyErr(f"ClassInfo of {self._name} is frozen")
        object.__setattr__(self, name, val)

    def name(self):
        return self._name

    def mode(self):
        return self._mode

    def container(self):
        return self._container

    def constructor(self):
        """Constructor Box, or None"""
        return self._constructor

    def staticConstructor(self):
        """StaticConstructor Box, or None"""
        return self._staticConstructor

    def base(self):
        """The extended type, or None"""
        return self._base

    def nativeBase(self):
        """Nearest ancestor that is not a generated Class, or None if that is object"""
        for klass in self._type.__mro__[1:]:
            if klass is object:
                return None
            if ClassInfo.of(klass, checked=False) is None:
                return klass
        return None

    def mixins(self):
        return list(self._mixins)

    def interfaces(self):
        """Interfaces listed in Implements"""
        return list(self._interfaces)

    def implements(self, iface):
        """True if this Class conforms to iface"""
        return iface in self._interfaces or iface.isImplementedBy(self._type)

    def events(self):
        """Events Enum, or None"""
        return self._events

    def definition(self):
        """Read-only view of the definition this Class was built from, with its Boxes as given"""
        return self._definition

    def interface(self):
        """Interface derived from the public instance members"""
        return self._interface

    def type(self):
        return self._type

    def inheritsFrom(self, cls):
        """True if cls is a proper ancestor of this Class"""
        return isinstance(cls, type) and cls is not self._type and issubclass(self._type, cls)

    def chain(self):
        """This ClassInfo followed by those of its generated ancestors"""
        info = self
        while info is not None:
            yield info
            info = ClassInfo.of(info._base, checked=False) if info._base is not None else None

    def publicMembers(self):
        """Storage Box of every public instance member, including inherited ones"""
        members = {}
        for klass in self._type.__mro__:
            info = ClassInfo.of(klass, checked=False)
            if info is None:
                continue
            for key, val in vars(klass).items():
                if isinstance(val, PublicMember) and key not in members:
                    members[key] = info._container.ownStorage(key)
        return members

    def toStr(self):
        return f"ClassInfo({self._name})"


#################################################################
# Generated type
#################################################################

class PublicMember:
    """Redirect from a public instance to its member slot in a Class domain"""

    __slots__ = ("_name", "_info")

    def __init__(self, name, info):
        self._name = name
        self._info = info

    def _domain(self, inst):
        domain = self._info.container().domains.get(inst)
        if domain is None:
            raise UnresolvedErr(f"{self._info.name()} part of this {type(inst).__name__} is not constructed yet")
        return domain

    def __get__(self, inst, owner=None):
        if inst is None:
            raise UnknownSlotErr(f"'{self._name}' is an instance member of {self._info.name()}")
        return self._domain(inst).__meta__.read(self._name)

    def __set__(self, inst, val):
        self._domain(inst).__meta__.write(self._name, val)

    def __delete__(self, inst):
        raise ReadonlyErr(f"Cannot delete member '{self._name}'")

    def __repr__(self):
        return f"<public member {self._info.name()}.{self._name}>"


def _nativeAttr(cls, name):
    """Look name up on the first class in cls's MRO that is not generated"""
    for klass in cls.__mro__:
        if "__classinfo__" not in vars(klass):
            return getattr(klass, name)
    return getattr(object, name)


def _isDeclared(inst, name):
    if name in getattr(inst, "__dict__", ()):
        return True
    for klass in type(inst).__mro__:
        if name in vars(klass):
            return hasattr(type(vars(klass)[name]), "__set__")
    return False


def _publicStatic(cls, name):
    info = ClassInfo.of(cls, checked=False)
    if info is None or (name.startswith("__") and name.endswith("__")):
        return None
    return info.container().publicStatic.get(name)


def _init(self, *args, **kwargs):
    raise ConstructErr(f"{type(self).__name__} must be constructed by calling the Class itself")


def _setattr(self, name, val):
    if not _isDeclared(self, name) and Constructor.isSealed(self):
        raise ReadonlyErr(f"Cannot add '{name}' to sealed {type(self).__name__} instance")
    _nativeAttr(type(self), "__setattr__")(self, name, val)


def _delattr(self, name):
    if Constructor.isSealed(self) and name not in getattr(self, "__dict__", ()):
        raise ReadonlyErr(f"Cannot delete '{name}' from sealed {type(self).__name__} instance")
    _nativeAttr(type(self), "__delattr__")(self, name)


class ClassType(type):
    """
    Metaclass of every generated Class.

    Calling the Class runs the construction protocol; public static members
    are read and written on the Class itself.
    """

    def __new__(mcs, name, bases, ns, **kwargs):
        if ns.pop("__classbox__", None) is not _GENERATED:
            raise ClassDefErr(f"{name}: a generated Class cannot be extended with a class statement; "
                              "use Class({'Extends': ...}) instead")
        return super().__new__(mcs, name, bases, ns, **kwargs)

    def __call__(cls, *args, **kwargs):
        return Constructor.construct(cls, args, kwargs)

    def __getattr__(cls, name):
        box = _publicStatic(cls, name)
        if box is None:
            raise UnknownSlotErr(f"{cls.__name__} has no public static member '{name}'")
        return box.value.get(cls)

    def __setattr__(cls, name, val):
        if name.startswith("__") and name.endswith("__"):
            type.__setattr__(cls, name, val)
            return
        box = _publicStatic(cls, name)
        if box is None:
            raise ReadonlyErr(f"Cannot add '{name}' to Class {cls.__name__}")
        box.value.set(cls, val)

    def __delattr__(cls, name):
        raise ReadonlyErr(f"Cannot delete '{name}' from Class {cls.__name__}")

    def __dir__(cls):
        names = set(type.__dir__(cls))
        info = ClassInfo.of(cls, checked=False)
        if info is not None:
            names.update(info.container().publicStatic.names())
        return sorted(names)


#################################################################
# Class
#################################################################

class Class:
    """
    Class builds a new type from a definition dict.

    ``Class(name, definition)`` (or ``Class(definition)``) returns the
    generated type. Recognized keys are Mode, Extends, Implements, Mixins,
    Events, Constructor and StaticConstructor; every other key is a member,
    given either as a raw value (Public) or wrapped by the modifiers, which
    are also reachable as attributes of Class.
    """

    Private = staticmethod(Private)
    Protected = staticmethod(Protected)
    Public = staticmethod(Public)
    Static = staticmethod(Static)
    Final = staticmethod(Final)
    Abstract = staticmethod(Abstract)
    Delegate = staticmethod(Delegate)
    Property = staticmethod(Property)
    Type = staticmethod(Type)
    Modes = Modes
    Privilege = Privilege

    def __new__(cls, name=None, definition=None):
        return ClassBuilder(name, definition).build()

    @staticmethod
    def info(cls):
        """Shortcut for ClassInfo.of"""
        return ClassInfo.of(cls)


class ClassBuilder(Obj):
    """
    ClassBuilder turns one definition into a generated type.

    The ScopeContainer is populated, composed and frozen before the type
    exists; the type is handed out only after its static domain is built,
    its interfaces are checked and its StaticConstructor has run.
    """

    _anonymous = 0

    def __init__(self, name=None, definition=None):
        super().__init__()
        if definition is None and name is not None and not isinstance(name, str):
            name, definition = None, name
        if definition is None:
            definition = {}
        if not isinstance(definition, dict):
            raise ClassDefErr(f"Class definition must be a dict, not {type(definition).__name__}")
        if name is not None and not isinstance(name, str):
            raise ClassDefErr("Class name must be a str")
        if not name:
            ClassBuilder._anonymous += 1
            name = f"Anonymous{ClassBuilder._anonymous}"
        self.name = name
        self.definition = dict(definition)

    def build(self):
        d = self.definition
        mode = self.checkMode(d.get("Mode", Modes.Default))
        base = Composer.validateBase(d.get("Extends"))
        interfaces = self.checkImplements(d.get("Implements"))
        events = self.makeEvents(d.get("Events"), base)
        ctor = self.checkConstructor(d.get("Constructor"))
        sctor = self.checkStaticConstructor(d.get("StaticConstructor"))
        members = {key: Composer.memberBox(key, val)
                   for key, val in d.items() if key not in Composer.SPECIAL}

        container = ScopeContainer(self.name)
        populateScopes(container, members)
        Composer.blendMixins(container, d.get("Mixins"))
        Composer.inherit(container, base, mode)
        container.freeze()

        info = ClassInfo(self.name, mode, container, ctor, sctor, base,
                         d.get("Mixins") or (), interfaces, events, d)
        cls = self.makeType(info, base, events)
        info._attach(cls)
        staticDomain = createStaticDomain(info)

        for i, iface in enumerate(interfaces):
            if not iface.isImplementedBy(cls):
                raise ClassDefErr(f"Implements[{i}]: {self.name} does not implement {iface.name()}")

        log = Log.get()
        if sctor is not None:
            fn = sctor.value.method() if isinstance(sctor.value, Functor) else sctor.value
            log.debug(f"{self.name}: running StaticConstructor")
            fn(staticDomain)

        log.debug(f"Created Class {self.name} (mode={mode.name()}, base={getattr(base, '__name__', None)})")
        return cls

    def makeType(self, info, base, events):
        container = info.container()
        ns = {
            "__classbox__": _GENERATED,
            "__classinfo__": info,
            "__qualname__": self.name,
            "__init__": _init,
            "__setattr__": _setattr,
            "__delattr__": _delattr,
            "Events": events,
        }
        for key in container.public.keys():
            ns[key] = PublicMember(key, info)
        for key in container.mixins.public.keys():
            if key not in ns and container.private.own(key) is None:
                ns[key] = PublicMember(key, info)

        bases = (base,) if base is not None else ()
        try:
            return ClassType(self.name, bases, ns)
        except TypeError as e:
            raise ClassDefErr(f"Extends: cannot extend {base.__name__}: {e}", e)

    #################################################################
    # Definition checks
    #################################################################

    @staticmethod
    def checkMode(mode):
        if not Modes.isMember(mode):
            raise ClassDefErr(f"Mode: expected one of Modes {Modes.names()}, not {mode!r}")
        return mode

    @staticmethod
    def checkImplements(implements):
        if implements is None:
            return []
        if not isinstance(implements, list):
            raise ClassDefErr("Implements must be a list of Interfaces")
        for i, iface in enumerate(implements):
            if not isinstance(iface, Interface):
                raise ClassDefErr(f"Implements[{i}]: expected an Interface, not {type(iface).__name__}")
        return implements

    @staticmethod
    def makeEvents(events, base):
        names = []
        info = ClassInfo.of(base, checked=False) if base is not None else None
        if info is not None and info.events() is not None:
            names.extend(info.events().names())
        if events is not None:
            if not isinstance(events, list):
                raise ClassDefErr("Events must be a list of event names")
            for i, event in enumerate(events):
                if not isinstance(event, str) or not event.isidentifier():
                    raise ClassDefErr(f"Events[{i}]: event names must be identifier strings, not {event!r}")
                if event in names:
                    continue
                names.append(event)
        if not names:
            return None
        return Enum(names[0], names)

    @staticmethod
    def checkConstructor(ctor):
        if ctor is None:
            return None
        box = ctor.copy() if isinstance(ctor, Box) else Box(value=ctor)
        if box.isStatic:
            raise ClassDefErr("Constructor cannot be Static")
        if box.isProperty:
            raise ClassDefErr("Constructor cannot be a Property")
        if box.isAbstract:
            raise ClassDefErr("Constructor cannot be Abstract")
        if not callable(box.value) or isinstance(box.value, type):
            raise ClassDefErr("Constructor must be a function")
        if box.noPrivilege:
            box.isPublic = True
        return box.lock()

    @staticmethod
    def checkStaticConstructor(sctor):
        if sctor is None:
            return None
        box = sctor.copy() if isinstance(sctor, Box) else Box(value=sctor)
        for flag in ("isPrivate", "isProtected", "isProperty", "isAbstract", "isFinal"):
            if getattr(box, flag):
                raise ClassDefErr(f"StaticConstructor cannot be {flag[2:]}")
        if not callable(box.value) or isinstance(box.value, type):
            raise ClassDefErr("StaticConstructor must be a function")
        return box.lock()
