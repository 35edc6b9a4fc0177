# Copyright (c) 2025-2026 provide.io llc
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Exception hierarchy for turn message parsing.

Only hard failures are raised. Problems inside a rule file or a message are
reported as diagnostics and never interrupt loading or parsing.
"""


class TurnMsgError(Exception):
    """Base exception for turnmsg operations."""

    pass


class RuleFileError(TurnMsgError):
    """Rule definition file could not be read."""

    pass


class RuleFileNotFoundError(RuleFileError):
    """Rule definition file does not exist."""

    pass


class NameTableError(TurnMsgError):
    """Name table file could not be read or is malformed."""

    pass
