#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

import os

from .Obj import Obj


class Env(Obj):
    """Engine environment - configuration lookup for classbox"""

    _instance = None

    # Prefix for environment variable overrides: CLASSBOX_LOGLEVEL, ...
    _ENV_PREFIX = "CLASSBOX_"

    _DEFAULTS = {
        "logLevel": "info",
        "warnImplicitSuper": True,
        "copyMutableDefaults": True,
    }

    def __init__(self):
        super().__init__()
        self._overrides = {}

    @staticmethod
    def cur():
        if Env._instance is None:
            Env._instance = Env()
        return Env._instance

    def vars(self):
        """Return the CLASSBOX_* environment variables as a dict."""
        return {k: v for k, v in os.environ.items() if k.startswith(Env._ENV_PREFIX)}

    def config(self, key, defVal=None):
        """Get configuration value.

        Lookup order is explicit overrides, then the CLASSBOX_<KEY>
        environment variable, then the built-in default, then defVal.

        Args:
            key: Config key
            defVal: Default value if not found

        Returns:
            Config value or default
        """
        if key in self._overrides:
            return self._overrides[key]

        val = os.environ.get(Env._ENV_PREFIX + key.upper())
        if val is not None:
            return val

        if key in Env._DEFAULTS:
            return Env._DEFAULTS[key]
        return defVal

    def configBool(self, key, defVal=False):
        """Get configuration value coerced to bool."""
        val = self.config(key, defVal)
        if isinstance(val, str):
            return val.strip().lower() in ("true", "yes", "on", "1")
        return bool(val)

    def setConfig(self, key, val):
        """Override a config value for this process; None removes the override."""
        if val is None:
            self._overrides.pop(key, None)
        else:
            self._overrides[key] = val
        if key == "logLevel":
            from .Log import Log
            Log.configure()
