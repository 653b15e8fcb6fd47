#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Obj import Obj
from .Box import Box
from .Err import ReadonlyErr, UnresolvedErr


class Link(Obj):
    """Zero-storage redirect to the authoritative slot of a member.

    A Link names the member (key) and the ScopeContainer that stores it
    (source). Static links resolve to the source's static domain; instance
    links resolve to the source's private domain for a given public instance.
    """

    def __init__(self, key, source, isStatic=False, isFinal=False, isAbstract=False, type=None):
        super().__init__()
        self._key = key
        self._source = source
        self._isStatic = isStatic
        self._isFinal = isFinal
        self._isAbstract = isAbstract
        self._type = type

    @staticmethod
    def make(key, source, box):
        """Create a Link mirroring the attributes of the storage box"""
        return Link(key, source, box.isStatic, box.isFinal, box.isAbstract, box.type)

    def key(self):
        return self._key

    def source(self):
        return self._source

    def isStatic(self):
        return self._isStatic

    def isFinal(self):
        return self._isFinal

    def isAbstract(self):
        return self._isAbstract

    def type(self):
        return self._type

    def storage(self):
        """Box holding the member in the source container"""
        return self._source.ownStorage(self._key, self._isStatic)

    def resolve(self, target):
        """Return the domain holding the member for target.

        Raises UnresolvedErr when that domain does not exist yet, as for an
        inherited member read in a constructor before Super() ran.
        """
        if self._isStatic:
            domain = self._source.staticDomain
            if domain is None:
                raise UnresolvedErr(f"Static member '{self._key}' of {self._source.name} used before the Class exists")
            return domain
        domain = self._source.domains.get(target)
        if domain is None:
            raise UnresolvedErr(f"Member '{self._key}' of {self._source.name} used before Super() constructed it")
        return domain

    def get(self, target):
        return self.resolve(target).__meta__.read(self._key)

    def set(self, target, val):
        if self._isFinal:
            raise ReadonlyErr(f"Cannot assign Final member '{self._key}'")
        self.resolve(target).__meta__.write(self._key, val)

    def toStr(self):
        kind = "static " if self._isStatic else ""
        return f"Link({kind}{self._source.name}.{self._key})"


def makeLinkBox(key, box, source):
    """Create the Link Box standing in for box in a more visible scope"""
    link = Box(isProperty=True, isStatic=box.isStatic, value=Link.make(key, source, box))
    link.isLink = True
    return link.lock()


def resolveBox(box):
    """Follow Link Boxes down to the Box that stores the member"""
    while box is not None and box.isLink:
        box = box.value.storage()
    return box
