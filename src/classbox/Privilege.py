#
# Copyright (c) 2025, Brian Frank and Andy Frank
# Licensed under the Academic Free License version 3.0
#

from .Enum import Enum

# Visibility tier of a member. Link marks redirect entries created by the
# engine and is never assigned through the public modifiers.
Privilege = Enum("None", ["None", "Public", "Protected", "Private", "Link"])

# Inheritability of a generated class.
Modes = Enum("Default", ["Default", "Abstract", "Final"])
