#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

#
# Log - engine diagnostics, forwarded to the stdlib logging module
#
import datetime
import functools
import logging
import re

from .Obj import Obj


@functools.total_ordering
class LogLevel(Obj):
    """
    Severity of a LogRec: debug < info < warn < err < silent.

    Levels are singletons reached as ``LogLevel.warn`` or by name with
    fromStr(); each maps onto a stdlib logging level.
    """

    _byName = {}

    def __init__(self, name, ordinal, pyLevel):
        super().__init__()
        self._name = name
        self._ordinal = ordinal
        self._pyLevel = pyLevel
        LogLevel._byName[name] = self

    @staticmethod
    def fromStr(name, checked=True):
        level = LogLevel._byName.get(str(name).strip().lower())
        if level is None and checked:
            from .Err import ArgErr
            raise ArgErr(f"Unknown log level: {name}")
        return level

    @staticmethod
    def vals():
        """Every level, lowest severity first"""
        return sorted(LogLevel._byName.values())

    def name(self):
        return self._name

    def ordinal(self):
        return self._ordinal

    def pyLevel(self):
        """Matching stdlib logging level"""
        return self._pyLevel

    def toStr(self):
        return self._name

    def __lt__(self, other):
        return self._ordinal < other._ordinal


LogLevel.debug = LogLevel("debug", 0, logging.DEBUG)
LogLevel.info = LogLevel("info", 1, logging.INFO)
LogLevel.warn = LogLevel("warn", 2, logging.WARNING)
LogLevel.err = LogLevel("err", 3, logging.ERROR)
LogLevel.silent = LogLevel("silent", 4, logging.CRITICAL + 10)


class LogRec(Obj):
    """One message handed to the Log handlers"""

    def __init__(self, time, level, logName, msg, err=None):
        super().__init__()
        self._time = time
        self._level = level
        self._logName = logName
        self._msg = msg
        self._err = err

    def time(self):
        return self._time

    def level(self):
        return self._level

    def logName(self):
        return self._logName

    def msg(self):
        return self._msg

    def err(self):
        return self._err

    def toStr(self):
        return f"[{self._level}] {self._logName}: {self._msg}"


class Log(Obj):
    """
    Log is a named, leveled message sink.

    The engine writes to the ``classbox`` log, whose level comes from the
    logLevel config key. A record that passes the level goes to every
    handler registered with addHandler() and then to the stdlib logger of
    the same name; a failing handler is reported there and skipped.
    """

    ENGINE = "classbox"

    _registry = {}
    _handlers = []

    _NAME = re.compile(r"[A-Za-z0-9_.]+")

    def __init__(self, name, register=True):
        super().__init__()
        if not isinstance(name, str) or not Log._NAME.fullmatch(name):
            from .Err import ArgErr
            raise ArgErr(f"Invalid log name: {name!r}")
        if register and name in Log._registry:
            from .Err import ArgErr
            raise ArgErr(f"Log already registered: {name}")
        self._name = name
        self._level = LogLevel.info
        self._logger = logging.getLogger(name)
        if register:
            Log._registry[name] = self

    @staticmethod
    def get(name=None):
        """Registered log of that name, created on first use; the engine log by default"""
        name = name or Log.ENGINE
        log = Log._registry.get(name)
        if log is None:
            log = Log(name)
            if name == Log.ENGINE:
                Log.configure()
        return log

    @staticmethod
    def find(name, checked=True):
        log = Log._registry.get(name)
        if log is None and checked:
            from .Err import UnknownSlotErr
            raise UnknownSlotErr(f"Unknown log: {name}")
        return log

    @staticmethod
    def list_():
        return list(Log._registry.values())

    @staticmethod
    def configure():
        """Reapply the logLevel config key to the engine log"""
        from .Env import Env
        log = Log._registry.get(Log.ENGINE)
        if log is not None:
            log.level(LogLevel.fromStr(Env.cur().config("logLevel", "info")))

    #################################################################
    # Level
    #################################################################

    def name(self):
        return self._name

    def level(self, value=None):
        """Current level, or set it when value is given"""
        if value is None:
            return self._level
        self._level = value

    def isEnabled(self, level):
        return level >= self._level

    def isDebug(self):
        return self.isEnabled(LogLevel.debug)

    #################################################################
    # Messages
    #################################################################

    def debug(self, msg, err=None):
        self._emit(LogLevel.debug, msg, err)

    def info(self, msg, err=None):
        self._emit(LogLevel.info, msg, err)

    def warn(self, msg, err=None):
        self._emit(LogLevel.warn, msg, err)

    def err(self, msg, err=None):
        self._emit(LogLevel.err, msg, err)

    def _emit(self, level, msg, err):
        if self.isEnabled(level):
            self.log(LogRec(datetime.datetime.now(), level, self._name, msg, err))

    def log(self, rec):
        for handler in Log.handlers():
            try:
                handler(rec)
            except Exception:
                self._logger.exception("Log handler %r failed", handler)
        self._logger.log(rec.level().pyLevel(), rec.msg(), exc_info=rec.err())

    def toStr(self):
        return self._name

    #################################################################
    # Handlers
    #################################################################

    @staticmethod
    def handlers():
        return list(Log._handlers)

    @staticmethod
    def addHandler(handler):
        """Register a callable receiving every LogRec of every log"""
        if not callable(handler):
            from .Err import ArgErr
            raise ArgErr("Handler must be callable")
        Log._handlers.append(handler)

    @staticmethod
    def removeHandler(handler):
        if handler in Log._handlers:
            Log._handlers.remove(handler)
