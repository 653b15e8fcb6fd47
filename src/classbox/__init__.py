#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

# classbox - runtime class construction with private, protected and public
# scopes, statics, mixins, interfaces and single inheritance

# Base types
from .Obj import Obj
from .Enum import Enum, EnumVal
from .Functor import Functor

# Environment and logging
from .Env import Env
from .Log import Log, LogLevel, LogRec

# Errors
from .Err import (Err, ClassDefErr, AbstractErr, AccessErr, ConstructErr, CastErr,
                  ArgErr, ReadonlyErr, UnknownSlotErr, UnresolvedErr)

# Definition vocabulary
from .Privilege import Privilege, Modes
from .Box import Box, modifyBox
from .Modifiers import Private, Protected, Public, Static, Final, Abstract, Delegate, Property, Type
from .Interface import Interface

# Engine
from .Link import Link
from .Scope import ScopeNode, ScopeContainer, populateScopes, expandScope
from .Domain import Domain, DomainMap
from .Constructor import Constructor, Construction, States
from .Class import Class, ClassInfo, ClassType

__version__ = "1.0.0"
