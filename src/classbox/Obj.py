#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import itertools


class Obj:
    """Root of the classbox engine types.

    Bridges the engine's equals/hash/toStr conventions to the Python
    dunder protocol. Identity equality unless a subclass says otherwise.
    """

    _ids = itertools.count(1)

    def __init__(self):
        self._hash = next(Obj._ids)

    def equals(self, that):
        return self is that

    def hash(self):
        # Subclasses that skip Obj.__init__ get an id on first use
        h = self.__dict__.get("_hash") if hasattr(self, "__dict__") else None
        if h is None:
            h = next(Obj._ids)
            object.__setattr__(self, "_hash", h)
        return h

    def toStr(self):
        return f"{type(self).__name__}@{self.hash()}"

    def __eq__(self, other):
        return self.equals(other)

    def __hash__(self):
        return self.hash()

    def __str__(self):
        return self.toStr()

    def __repr__(self):
        return self.toStr()
