#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import inspect

from .Obj import Obj


class Functor(Obj):
    """Rebindable callable.

    Wraps a function whose first parameter is the receiver. Calling the
    Functor passes the current receiver followed by the call arguments. The
    receiver can be retargeted after creation until fix() is called; a
    Functor with no receiver calls the function with the arguments as given.
    """

    def __init__(self, owner, method, unsealed=False):
        super().__init__()
        if isinstance(method, Functor):
            method = method.method()
        if not callable(method):
            from .Err import ArgErr
            raise ArgErr(f"Functor requires a callable, not {type(method).__name__}")
        self._owner = owner
        self._method = method
        self._fixed = False
        self._unsealed = unsealed
        self.__name__ = getattr(method, "__name__", "functor")
        self.__doc__ = getattr(method, "__doc__", None)

    @staticmethod
    def make(owner, method):
        """Factory method"""
        return Functor(owner, method)

    def owner(self):
        """Get the current receiver"""
        return self._owner

    def method(self):
        """Get the wrapped function"""
        return self._method

    def isFixed(self):
        return self._fixed

    def retarget(self, owner):
        """Change the receiver; ignored once fixed"""
        if not self._fixed:
            self._owner = owner
        return self

    def rescope(self, owner):
        """Return a new Functor wrapping the same function for another receiver"""
        return Functor(owner, self._method, self._unsealed)

    def fix(self):
        """Freeze the receiver for the lifetime of this Functor"""
        self._fixed = True
        return self

    def arity(self):
        """Number of parameters after the receiver, or -1 if variadic/unknown"""
        return Functor.arityOf(self._method, receiver=self._owner is not None)

    @staticmethod
    def arityOf(fn, receiver=True):
        """Count the positional parameters of fn, skipping the receiver."""
        if isinstance(fn, Functor):
            return fn.arity()
        try:
            sig = inspect.signature(fn)
        except (TypeError, ValueError):
            return -1
        count = 0
        for p in sig.parameters.values():
            if p.kind in (p.VAR_POSITIONAL, p.VAR_KEYWORD):
                return -1
            if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD):
                count += 1
        if receiver and not inspect.ismethod(fn):
            count -= 1
        return max(count, 0)

    def __call__(self, *args, **kwargs):
        if self._owner is None:
            return self._method(*args, **kwargs)
        return self._method(self._owner, *args, **kwargs)

    def call(self, *args):
        """Call the function"""
        return self.__call__(*args)

    def callList(self, args):
        """Call with args from list"""
        return self.__call__(*(args or []))

    def callOn(self, target, args=None):
        """Call with an explicit receiver, leaving this Functor unchanged"""
        return self._method(target, *(args or []))

    def __setattr__(self, name, val):
        if getattr(self, "_fixed", False) and not getattr(self, "_unsealed", False):
            from .Err import ReadonlyErr
            raise ReadonlyErr(f"Functor is fixed: cannot set '{name}'")
        object.__setattr__(self, name, val)

    def toStr(self):
        return f"Functor({self.__name__})"
