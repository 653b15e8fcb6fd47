#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import copy

from .Obj import Obj
from .Box import accessorsOf, isMethodValue
from .Err import ClassDefErr, ReadonlyErr
from .Functor import Functor
from .Link import makeLinkBox
from .Slot import AbstractSlot, AccessorSlot, LinkSlot, ValueSlot, returnChecked


class ScopeNode(Obj):
    """
    ScopeNode is one visibility tier of a Class: a table of member Boxes
    plus an explicit parent node consulted for names missing locally.
    """

    def __init__(self, name, parent=None):
        super().__init__()
        self._name = name
        self._parent = parent
        self._entries = {}
        self._frozen = False

    def name(self):
        return self._name

    def parent(self):
        return self._parent

    def setParent(self, parent):
        self._checkFrozen()
        self._parent = parent

    def isFrozen(self):
        return self._frozen

    def freeze(self):
        self._frozen = True
        return self

    def _checkFrozen(self):
        if self._frozen:
            raise ReadonlyErr(f"Scope {self._name} is frozen")

    #################################################################
    # Entries
    #################################################################

    def own(self, key):
        """Box defined directly on this node"""
        return self._entries.get(key)

    def hasOwn(self, key):
        return key in self._entries

    def keys(self):
        """Names defined directly on this node"""
        return list(self._entries)

    def set(self, key, box):
        self._checkFrozen()
        self._entries[key] = box

    def nodes(self):
        """This node followed by its ancestors"""
        node = self
        while node is not None:
            yield node
            node = node._parent

    def find(self, key):
        """Return (box, node) for the nearest definition of key, or (None, None)"""
        for node in self.nodes():
            if key in node._entries:
                return node._entries[key], node
        return None, None

    def get(self, key):
        return self.find(key)[0]

    def has(self, key):
        return self.find(key)[1] is not None

    def items(self):
        """(name, box) for every visible name; nearer nodes shadow farther ones"""
        seen = set()
        for node in self.nodes():
            for key, box in node._entries.items():
                if key not in seen:
                    seen.add(key)
                    yield key, box

    def names(self):
        return [key for key, _ in self.items()]

    def toStr(self):
        return f"ScopeNode({self._name}: {', '.join(self._entries)})"


class ScopeContainer(Obj):
    """
    ScopeContainer holds the six scope nodes of one Class.

    Every member is stored once, in ``private`` or ``static``; the
    ``protected``, ``public``, ``protectedStatic`` and ``publicStatic`` nodes
    hold Link Boxes pointing back at that storage. Members blended from
    mixins live in the nested ``mixins`` container, whose nodes sit between
    this Class's nodes and the ancestor's.
    """

    SCOPES = ("private", "protected", "protectedStatic", "public", "publicStatic", "static")

    def __init__(self, name, nested=False):
        super().__init__()
        self.name = name
        for scope in ScopeContainer.SCOPES:
            setattr(self, scope, ScopeNode(f"{name}.{scope}"))
        self.mixins = None if nested else ScopeContainer(f"{name}.mixins", nested=True)
        self.superProto = None
        self.base = None
        self.staticDomain = None
        from .Domain import DomainMap
        self.domains = DomainMap()

    def nodes(self):
        return [getattr(self, scope) for scope in ScopeContainer.SCOPES]

    def ownStorage(self, key, isStatic=False):
        """Storage Box for key in this Class (local or blended), or None"""
        scope = "static" if isStatic else "private"
        box = getattr(self, scope).own(key)
        if box is None and self.mixins is not None:
            box = getattr(self.mixins, scope).own(key)
        return box

    def chain(self):
        """This container followed by the containers of its generated ancestors"""
        container = self
        while container is not None:
            yield container
            container = container.base

    def implementer(self, key):
        """Nearest container in the chain that implements key, or None.

        Walks from this Class toward its ancestors; reaching the Abstract
        declaration first means nothing implements it.
        """
        for container in self.chain():
            box = container.ownStorage(key)
            if box is not None:
                return None if box.isAbstract else container
        return None

    def freeze(self):
        for node in self.nodes():
            node.freeze()
        if self.mixins is not None:
            self.mixins.freeze()
        return self

    def isFrozen(self):
        return self.private.isFrozen()

    def toStr(self):
        return f"ScopeContainer({self.name})"


def populateScopes(container, members, source=None):
    """Partition members into the nodes of container.

    Instance members are stored in ``private`` and static ones in
    ``static``; each member above Private also gets Link Boxes in the
    matching protected/public nodes. A member with no privilege is Public.
    Links point at source, which defaults to container.
    """
    if source is None:
        source = container

    for key, box in members.items():
        if box.noPrivilege:
            box.isPublic = True
        if box.isAbstract and box.isPrivate:
            raise ClassDefErr(f"{key}: a Private member cannot be Abstract!")
        if box.isAbstract and box.isStatic:
            raise ClassDefErr(f"{key}: a Static member cannot be Abstract!")

        if box.isStatic:
            container.static.set(key, box)
            if box.isProtected or box.isPublic:
                container.protectedStatic.set(key, makeLinkBox(key, box, source))
            if box.isPublic:
                container.publicStatic.set(key, makeLinkBox(key, box, source))
        else:
            container.private.set(key, box)
            if box.isProtected or box.isPublic:
                container.protected.set(key, makeLinkBox(key, box, source))
            if box.isPublic:
                container.public.set(key, makeLinkBox(key, box, source))

        box.lock()

    return container


def _bind(target, fn, addContext):
    if isinstance(fn, Functor):
        return fn.rescope(target if addContext else None)
    return Functor(target if addContext else None, fn)


def expandScope(dest, scope, target, addContext=True):
    """Materialize the Boxes visible from scope as Slots in dest.

    Names already in dest are skipped, so callers expand the highest
    precedence scopes first. With addContext, functions and accessors are
    bound to target as their receiver; otherwise they are called as given.
    """
    from .Env import Env
    copyDefaults = Env.cur().configBool("copyMutableDefaults", True)

    for key, box in scope.items():
        if key in dest:
            continue

        if box.isLink:
            dest[key] = LinkSlot(key, box)
        elif box.isAbstract:
            dest[key] = AbstractSlot(key, box)
        elif box.isProperty:
            getter, setter = accessorsOf(box.value)
            dest[key] = AccessorSlot(key, box,
                                     _bind(target, getter, addContext) if getter is not None else None,
                                     _bind(target, setter, addContext) if setter is not None else None)
        elif isMethodValue(box.value):
            fn = box.value
            if box.type is not None:
                fn = returnChecked(key, box.type, fn.method() if isinstance(fn, Functor) else fn)
            method = _bind(target, fn, addContext)
            if box.isDelegate:
                method.fix()
            dest[key] = ValueSlot(key, box, method, False)
        else:
            val = box.value
            if copyDefaults and type(val) in (list, dict, set):
                val = copy.copy(val)
            dest[key] = ValueSlot(key, box, val, not box.isFinal)

    return dest
