#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

#
# Domain - the member storage of one instance (or Class type) as seen from
# inside one Class.
#
import weakref

from .Obj import Obj
from .Err import CastErr, ReadonlyErr, UnknownSlotErr
from .Functor import Functor
from .Link import makeLinkBox
from .Scope import expandScope
from .Slot import LinkSlot, Slot, ValueSlot


class DomainMap(Obj):
    """
    DomainMap finds the private domain a Class created for an instance.

    Keyed by instance identity so unhashable instances (list subclasses)
    work; entries are dropped when the instance is collected.
    """

    def __init__(self):
        super().__init__()
        self._map = {}

    def get(self, inst):
        domain = self._map.get(id(inst))
        if domain is not None and domain.__meta__.instance() is inst:
            return domain
        return None

    def add(self, inst, domain):
        key = id(inst)
        self._map[key] = domain
        try:
            weakref.finalize(inst, self._map.pop, key, None)
        except TypeError:
            # Not weak referenceable (int, tuple subclasses): kept until removed
            pass

    def remove(self, inst):
        if self.get(inst) is not None:
            del self._map[id(inst)]

    def __contains__(self, inst):
        return self.get(inst) is not None

    def __len__(self):
        return len(self._map)


class _SelfSlot(Slot):
    """Back reference from a domain to its public instance"""

    def get(self, domain):
        return domain.__meta__.instance()


class SuperRef:
    """
    The ``Super`` member of a private domain.

    Calling it constructs the ancestor part of the instance; reading an
    attribute returns the ancestor's Protected or Public member of that name,
    bypassing any override.
    """

    __slots__ = ("_domain",)

    def __init__(self, domain):
        object.__setattr__(self, "_domain", domain)

    def __call__(self, *args, **kwargs):
        from .Constructor import Constructor
        Constructor.callSuper(self._domain, args, kwargs)

    def _find(self, name):
        meta = self._domain.__meta__
        base = meta.info().container().base
        if base is None:
            return None
        box = base.protected.get(name)
        if box is None:
            box = base.protectedStatic.get(name)
        return box

    def __getattr__(self, name):
        meta = self._domain.__meta__
        box = self._find(name)
        if box is not None:
            return box.value.get(meta.instance())
        native = meta.info().nativeBase()
        if native is not None and hasattr(native, name):
            return getattr(super(meta.info().type(), meta.instance()), name)
        raise UnknownSlotErr(f"Ancestor of {meta.info().name()} has no accessible member '{name}'")

    def __setattr__(self, name, val):
        box = self._find(name)
        if box is None:
            raise UnknownSlotErr(f"Ancestor of {self._domain.__meta__.info().name()} has no accessible member '{name}'")
        box.value.set(self._domain.__meta__.instance(), val)

    def __repr__(self):
        return f"<Super of {self._domain.__meta__.info().name()}>"


class DomainMeta(Obj):
    """
    Internal state of a Domain: its slot table, owning Class and instance.
    """

    def __init__(self, info, instance, isStatic=False):
        super().__init__()
        self._info = info
        self._isStatic = isStatic
        self._sealed = False
        self.slots = {}
        self.construction = None
        if isStatic:
            self._ref = lambda: instance
        else:
            try:
                self._ref = weakref.ref(instance)
            except TypeError:
                self._ref = lambda: instance

    def info(self):
        return self._info

    def instance(self):
        """Public instance (the Class type for a static domain)"""
        return self._ref()

    def isStatic(self):
        return self._isStatic

    def isSealed(self):
        return self._sealed

    def seal(self):
        self._sealed = True

    def names(self):
        return list(self.slots)

    def slot(self, name, checked=True):
        slot = self.slots.get(name)
        if slot is None and checked:
            raise UnknownSlotErr(f"{self._info.name()} has no member '{name}'")
        return slot

    def read(self, name):
        return self.slot(name).get(self._domain)

    def write(self, name, val):
        slot = self.slots.get(name)
        if slot is None:
            if self._sealed:
                raise ReadonlyErr(f"Cannot add member '{name}' to sealed {self._info.name()}")
            self.slots[name] = ValueSlot(name, None, val, True)
            return
        slot.set(self._domain, val)

    def delegate(self, fn):
        """Return a fixed Functor calling fn (or the named method) with this domain's receiver"""
        if isinstance(fn, str):
            method = self.read(fn)
            if not isinstance(method, Functor):
                raise CastErr(f"Member '{fn}' of {self._info.name()} is not a method")
            return Functor(method.owner(), method.method()).fix()
        return Functor(self._domain, fn).fix()

    def sibling(self, obj):
        """Return this Class's private domain for another instance"""
        domain = self._info.container().domains.get(obj)
        if domain is None:
            raise CastErr(f"{obj!r} is not an instance of {self._info.name()}")
        return domain

    def toStr(self):
        kind = "static" if self._isStatic else "private"
        return f"{self._info.name()} {kind} domain"


class Domain:
    """
    Domain is the receiver of every member function of a Class.

    Attribute access is routed through the slot table built when the domain
    was staged; once sealed no new names can be added.
    """

    __slots__ = ("__meta__",)

    def __init__(self, meta):
        object.__setattr__(self, "__meta__", meta)
        meta._domain = self

    def __getattr__(self, name):
        return self.__meta__.read(name)

    def __setattr__(self, name, val):
        self.__meta__.write(name, val)

    def __delattr__(self, name):
        raise ReadonlyErr(f"Cannot delete member '{name}'")

    def __dir__(self):
        return self.__meta__.names()

    def __repr__(self):
        return f"<{self.__meta__.toStr()}>"


def createDomain(info, inst, construction):
    """Stage the private domain of info's Class for inst.

    Slot precedence: context members, local storage, blended mixin storage,
    local statics, then the ancestor's Protected instance and static
    members. The domain is registered and sealed before it is returned.
    """
    container = info.container()
    meta = DomainMeta(info, inst)
    meta.construction = construction
    domain = Domain(meta)
    slots = meta.slots

    slots["Self"] = _SelfSlot("Self")
    if info.base() is not None:
        slots["Super"] = ValueSlot("Super", None, SuperRef(domain), False)
    slots["Delegate"] = ValueSlot("Delegate", None, meta.delegate, False)
    slots["Sibling"] = ValueSlot("Sibling", None, meta.sibling, False)
    slots["Events"] = ValueSlot("Events", None, info.events(), False)

    expandScope(slots, container.private, domain)
    expandScope(slots, container.mixins.private, domain)
    for node in (container.static, container.mixins.static):
        for key, box in node.items():
            if key not in slots:
                slots[key] = LinkSlot(key, makeLinkBox(key, box, container))
    expandScope(slots, container.protected, domain)
    expandScope(slots, container.protectedStatic, domain)

    container.domains.add(inst, domain)
    meta.seal()
    return domain


def createStaticDomain(info):
    """Build the domain holding the static members of info's Class"""
    from .Constructor import Constructor

    container = info.container()
    cls = info.type()
    meta = DomainMeta(info, cls, isStatic=True)
    domain = Domain(meta)
    slots = meta.slots

    slots["Self"] = ValueSlot("Self", None, cls, False)
    slots["Sibling"] = ValueSlot("Sibling", None, meta.sibling, False)
    slots["Delegate"] = ValueSlot("Delegate", None, meta.delegate, False)
    slots["Events"] = ValueSlot("Events", None, info.events(), False)
    if info.constructor() is not None:
        def createInstance(*args, **kwargs):
            return Constructor.construct(cls, args, kwargs, privileged=True)
        slots["CreateInstance"] = ValueSlot("CreateInstance", None, createInstance, False)

    expandScope(slots, container.static, domain)
    expandScope(slots, container.mixins.static, domain)
    expandScope(slots, container.protectedStatic, domain)

    container.staticDomain = domain
    meta.seal()
    return domain
