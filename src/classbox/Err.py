#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import traceback

from .Obj import Obj


class Err(Exception, Obj):
    """
    Err is the root of every error the engine raises.

    An Err carries a message and an optional cause; the cause is also
    chained as ``__cause__`` so tracebacks show it.
    """

    def __init__(self, msg=None, cause=None):
        Exception.__init__(self, msg)
        Obj.__init__(self)
        self._msg = msg
        self._cause = cause
        if cause is not None:
            self.__cause__ = cause

    @classmethod
    def make(cls, msg=None, cause=None):
        return cls(msg, cause)

    def msg(self):
        """Message, or the empty string"""
        return self._msg or ""

    def cause(self):
        return self._cause

    def toStr(self):
        name = type(self).__name__
        return f"{name}: {self._msg}" if self._msg else name

    def traceToStr(self):
        """Formatted traceback of this error and its causes"""
        lines = [self.toStr()]
        if self.__traceback__ is not None:
            lines.extend(traceback.format_tb(self.__traceback__))
        cause = self._cause
        while cause is not None:
            lines.append(f"  Caused by: {cause}")
            cause = getattr(cause, "_cause", None) or cause.__cause__
        return "\n".join(line.rstrip("\n") for line in lines)

    def __str__(self):
        return self.toStr()


#################################################################
# Definition errors
#################################################################

class ClassDefErr(Err):
    """Raised while processing a Class, Box or Interface definition.

    A definition error is always fatal to the call that triggered it: no
    partially built type is ever registered.
    """
    pass


#################################################################
# Runtime errors
#################################################################

class AbstractErr(Err, TypeError):
    """Abstract class constructed directly, or abstract member invoked.

    Also a TypeError, matching what Python raises for an abstract base class.
    """
    pass


class AccessErr(Err):
    """Constructor invoked from a context its privilege forbids"""
    pass


class ConstructErr(Err):
    """Instance construction protocol used out of order"""
    pass


class CastErr(Err, TypeError):
    """Value failed a declared Type constraint"""
    pass


class ArgErr(Err, ValueError):
    """Invalid argument to an engine call"""
    pass


class ReadonlyErr(Err, AttributeError):
    """Write to a Final, read-only or sealed member"""
    pass


class UnknownSlotErr(Err, AttributeError):
    """Member lookup failed"""
    pass


class UnresolvedErr(Err):
    """Link used before the object it redirects to exists"""
    pass
