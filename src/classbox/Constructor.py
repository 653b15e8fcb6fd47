#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

#
# Constructor - the protocol run each time a generated Class is called
#
from .Obj import Obj
from .Enum import Enum
from .Env import Env
from .Err import AbstractErr, AccessErr, ConstructErr
from .Functor import Functor
from .Log import Log
from .Privilege import Modes, Privilege

# Construction states, in the order an instance passes through them
States = Enum("Staging", ["Staging", "SuperPending", "UserConstructing", "Sealed"])


class Construction(Obj):
    """
    Construction tracks one Class's part of building one instance.
    """

    def __init__(self, info, driver=None):
        super().__init__()
        self._info = info
        self._driver = driver
        self._state = States.Staging
        self._superCalled = False

    def info(self):
        return self._info

    def driver(self):
        """Domain of the descendant whose Super() started this construction"""
        return self._driver

    def state(self):
        return self._state

    def superCalled(self):
        return self._superCalled

    def markSuperCalled(self):
        self._superCalled = True

    def transition(self, state):
        log = Log.get()
        if log.isDebug():
            log.debug(f"{self._info.name()}: {self._state.name()} -> {state.name()}")
        self._state = state

    def toStr(self):
        return f"Construction({self._info.name()}: {self._state.name()})"


def referencesSuper(fn):
    """True if the code of fn, or any function nested in it, names Super"""
    code = getattr(fn, "__code__", None)
    if code is None:
        return False
    pending = [code]
    while pending:
        code = pending.pop()
        if "Super" in code.co_names:
            return True
        pending.extend(c for c in code.co_consts if hasattr(c, "co_names"))
    return False


def compose(pre, body, post):
    """Chain the pre hook, constructor body and post hook into one function"""
    def constructor(domain, *args, **kwargs):
        if pre is not None:
            pre(domain)
        body(domain, *args, **kwargs)
        if post is not None:
            post(domain)
    return constructor


class Constructor:
    """
    Constructor drives instance creation through the Staging,
    SuperPending, UserConstructing and Sealed states.
    """

    @staticmethod
    def construct(cls, args, kwargs, privileged=False):
        """Create and fully construct a new instance of cls"""
        from .Class import ClassInfo
        info = ClassInfo.of(cls)
        Constructor.checkAccess(info, driven=False, privileged=privileged)

        inst = cls.__new__(cls)
        try:
            Constructor.build(info, inst, args, kwargs)
        except Exception:
            for container in info.container().chain():
                container.domains.remove(inst)
            raise
        return inst

    @staticmethod
    def checkAccess(info, driven, privileged=False):
        """Raise unless info's constructor may run in this context"""
        if info.mode() is Modes.Abstract and not driven:
            raise AbstractErr(f"Cannot instantiate Abstract Class {info.name()} directly")
        ctor = info.constructor()
        if ctor is None:
            return
        if ctor.privilege is Privilege.Protected and not driven:
            raise AccessErr(f"Constructor of {info.name()} is Protected")
        if ctor.privilege is Privilege.Private and not privileged:
            raise AccessErr(f"Constructor of {info.name()} is Private")

    @staticmethod
    def build(info, inst, args, kwargs, driver=None):
        """Run info's part of the protocol for inst"""
        from .Domain import createDomain

        construction = Construction(info, driver)
        domain = createDomain(info, inst, construction)

        base = info.base()
        ctor = info.constructor()
        if base is not None:
            construction.transition(States.SuperPending)
        else:
            construction.transition(States.UserConstructing)

        if ctor is None:
            if base is not None:
                Constructor.callSuper(domain, args, kwargs)
        else:
            body = ctor.value
            if isinstance(body, Functor):
                body = body.method()
            pre = post = None
            if base is not None:
                if referencesSuper(body):
                    post = Constructor._lateSuper
                else:
                    pre = Constructor._implicitSuper
            compose(pre, body, post)(domain, *args, **kwargs)

        construction.transition(States.Sealed)
        return domain

    @staticmethod
    def callSuper(domain, args, kwargs):
        """Construct the ancestor part of domain's instance"""
        from .Class import ClassInfo

        meta = domain.__meta__
        construction = meta.construction
        info = meta.info()
        if construction is None or construction.state() is States.Sealed:
            raise ConstructErr(f"{info.name()}: Super() can only be called while constructing")
        if construction.superCalled():
            raise ConstructErr(f"{info.name()}: Super() was already called")
        base = info.base()
        if base is None:
            raise ConstructErr(f"{info.name()} has no ancestor to construct")

        construction.markSuperCalled()
        inst = meta.instance()
        baseInfo = ClassInfo.of(base, checked=False)
        if baseInfo is not None:
            Constructor.checkAccess(baseInfo, driven=True)
            Constructor.build(baseInfo, inst, args, kwargs, driver=domain)
        else:
            base.__init__(inst, *args, **kwargs)
        construction.transition(States.UserConstructing)

    @staticmethod
    def _implicitSuper(domain):
        if Env.cur().configBool("warnImplicitSuper", True):
            Log.get().warn(f"{domain.__meta__.info().name()}: constructor never calls Super(); calling Super() for it")
        Constructor.callSuper(domain, (), {})

    @staticmethod
    def _lateSuper(domain):
        if domain.__meta__.construction.superCalled():
            return
        if Env.cur().configBool("warnImplicitSuper", True):
            Log.get().warn(f"{domain.__meta__.info().name()}: constructor returned without calling Super(); "
                           "Super() should be the first statement")
        Constructor.callSuper(domain, (), {})

    @staticmethod
    def isSealed(inst):
        """True once inst has been handed back by its Class"""
        from .Class import ClassInfo
        info = ClassInfo.of(type(inst), checked=False)
        if info is None:
            return False
        domain = info.container().domains.get(inst)
        return domain is not None and domain.__meta__.construction.state() is States.Sealed
