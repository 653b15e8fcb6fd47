#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

#
# Modifiers - the definition vocabulary of a Class
#
# Each modifier takes a raw value or a Box and returns a Box with one more
# attribute applied, so modifiers nest: Public(Static(Final(x))).
#
import types

from .Box import Box, modifyBox, accessorsOf
from .Err import ClassDefErr
from .Functor import Functor


def Private(val):
    """Member is visible only inside the declaring class"""
    return modifyBox(val, {"isPrivate": True}, val)


def Protected(val):
    """Member is visible inside the declaring class and its descendants"""
    return modifyBox(val, {"isProtected": True}, val)


def Public(val):
    """Member is visible everywhere"""
    return modifyBox(val, {"isPublic": True}, val)


def Static(val):
    """Member belongs to the Class type instead of its instances"""
    return modifyBox(val, {"isStatic": True}, val)


def Final(val):
    """Member can be neither overridden nor reassigned"""
    return modifyBox(val, {"isFinal": True}, val)


def Abstract(val=None):
    """Member must be supplied by a descendant.

    The payload, if any, is only a placeholder; a function placeholder gives
    the member its arity in the derived Interface.
    """
    return modifyBox(val, {"isAbstract": True}, val)


def Delegate(val):
    """Method always runs with its defining domain as receiver"""
    fn = val.value if isinstance(val, Box) else val
    if not isinstance(fn, (types.FunctionType, Functor)):
        raise ClassDefErr("Only functions can be Delegates!")
    return modifyBox(val, {"isDelegate": True}, val)


def Property(val):
    """Member backed by accessors: {"get": fn, "set": fn} or a builtin property"""
    payload = val.value if isinstance(val, Box) else val
    if accessorsOf(payload) is None:
        raise ClassDefErr("A Property requires a 'get' and/or 'set' function!")
    return modifyBox(val, {"isProperty": True}, val)


def Type(spec, val=None):
    """Constrain the values a member accepts to spec"""
    return modifyBox(val, {"type": spec}, val)


