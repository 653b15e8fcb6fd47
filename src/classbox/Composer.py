#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import keyword

from .Box import Box
from .Err import ClassDefErr
from .Link import resolveBox
from .Privilege import Modes
from .Scope import populateScopes


class Composer:
    """
    Composer merges mixins and an ancestor into the ScopeContainer of a
    new Class.

    After composition the local nodes of the container chain to the mixin
    nodes, which chain to the ancestor's nodes: local members shadow mixin
    members and mixin members shadow inherited ones.
    """

    # Names every domain defines for itself
    RESERVED = frozenset(["Self", "Super", "Delegate", "Sibling", "Events", "CreateInstance"])

    # Definition keys with engine meaning
    SPECIAL = frozenset(["Mode", "Extends", "Implements", "Mixins", "Events",
                         "Constructor", "StaticConstructor"])

    #################################################################
    # Members
    #################################################################

    @staticmethod
    def checkKey(key, where="definition"):
        """Raise ClassDefErr unless key can name a member"""
        if not isinstance(key, str) or not key.isidentifier() or keyword.iskeyword(key):
            raise ClassDefErr(f"{where}: invalid member name {key!r}")
        if key in Composer.RESERVED:
            raise ClassDefErr(f"{where}: '{key}' is reserved")
        if key.startswith("__") and key.endswith("__"):
            raise ClassDefErr(f"{where}: '{key}' is reserved")
        return key

    @staticmethod
    def memberBox(key, val, where="definition"):
        """Validate key and return val as a Box"""
        Composer.checkKey(key, where)
        if isinstance(val, Box):
            return val.copy()
        if isinstance(val, property):
            return Box(isProperty=True, value=val)
        return Box(value=val)

    #################################################################
    # Extends
    #################################################################

    @staticmethod
    def validateBase(base):
        """Raise ClassDefErr unless base can be extended"""
        if base is None:
            return None
        if not isinstance(base, type):
            raise ClassDefErr(f"Extends: expected a class, not {type(base).__name__}")
        from .Class import ClassInfo
        info = ClassInfo.of(base, checked=False)
        if info is not None and info.mode() is Modes.Final:
            raise ClassDefErr(f"Extends: cannot extend Final Class {info.name()}!")
        return base

    #################################################################
    # Mixins
    #################################################################

    @staticmethod
    def mixinMembers(mixin, index):
        """Return the members mixin contributes as name -> Box"""
        from .Class import ClassInfo
        where = f"Mixins[{index}]"

        if isinstance(mixin, dict):
            return {key: Composer.memberBox(key, val, where) for key, val in mixin.items()}

        if isinstance(mixin, type):
            info = ClassInfo.of(mixin, checked=False)
            if info is not None:
                # Public instance surface of a generated Class
                members = {}
                for key, box in info.container().public.items():
                    storage = resolveBox(box)
                    if storage is not None:
                        members[key] = storage.copy()
                return members

            members = {}
            for klass in reversed(mixin.__mro__):
                if klass is object:
                    continue
                for key, val in vars(klass).items():
                    if key.startswith("_") or isinstance(val, (staticmethod, classmethod)):
                        continue
                    members[key] = Composer.memberBox(key, val, where)
            return members

        if callable(mixin):
            raise ClassDefErr(f"{where}: cannot mix in a bare function; use a class or a dict")
        raise ClassDefErr(f"{where}: expected a class or a dict, not {type(mixin).__name__}")

    @staticmethod
    def blendMixins(container, mixins):
        """Flatten mixins into container.mixins"""
        if mixins is None:
            return container
        if not isinstance(mixins, list):
            raise ClassDefErr("Mixins must be a list")

        blended = {}
        for i, mixin in enumerate(mixins):
            for key, box in Composer.mixinMembers(mixin, i).items():
                if key in blended:
                    raise ClassDefErr(f"Members of Mixins[{i}] conflict with pre-existing members: '{key}'")
                blended[key] = box

        populateScopes(container.mixins, blended, source=container)
        return container

    #################################################################
    # Inheritance
    #################################################################

    @staticmethod
    def inherit(container, base, mode=Modes.Default):
        """Chain container to its mixins and to base, then check overrides"""
        from .Class import ClassInfo

        container.superProto = base
        info = ClassInfo.of(base, checked=False) if base is not None else None
        container.base = info.container() if info is not None else None

        for scope in ("protected", "public", "protectedStatic", "publicStatic"):
            mixinNode = getattr(container.mixins, scope)
            mixinNode.setParent(getattr(container.base, scope) if container.base is not None else None)
            getattr(container, scope).setParent(mixinNode)

        if container.base is not None:
            Composer.checkFinalOverrides(container)
        if mode is not Modes.Abstract:
            Composer.checkAbstracts(container)
        return container

    @staticmethod
    def checkFinalOverrides(container):
        base = container.base
        for storage, inherited in ((container.private, base.protected),
                                   (container.mixins.private, base.protected),
                                   (container.static, base.protectedStatic),
                                   (container.mixins.static, base.protectedStatic)):
            for key in storage.keys():
                box = inherited.get(key)
                if box is not None and box.value.isFinal():
                    raise ClassDefErr(f"{key}: cannot override Final member of {base.name}")

    @staticmethod
    def checkAbstracts(container):
        names = set(container.private.keys()) | set(container.mixins.private.keys())
        names.update(container.protected.names())
        for key in sorted(names):
            box = container.ownStorage(key)
            if box is None:
                box = resolveBox(container.protected.get(key))
            if box is not None and box.isAbstract and container.implementer(key) is None:
                raise ClassDefErr(f"{container.name}: Abstract member '{key}' is not implemented; "
                                  "implement it or declare the Class Abstract")
