# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Severity and facility tables for syslog encoding
#
# Application (bunyan-style) levels live on a 0-60 scale; syslog severities on a
# 0-7 scale where 0 is the most severe. map_application_level() compresses the
# former onto the latter.

# Standard library imports
import math
import re

from enum import IntEnum
from typing import Any, Dict, Optional

_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


class ApplicationLevel(IntEnum):
    """Named application log levels."""

    TRACE = 10
    DEBUG = 20
    INFO = 30
    WARN = 40
    ERROR = 50
    FATAL = 60


class Severity(IntEnum):
    """Syslog severities (RFC 5424 section 6.2.1)."""

    EMERG = 0
    ALERT = 1
    CRIT = 2
    ERR = 3
    WARNING = 4
    NOTICE = 5
    INFO = 6
    DEBUG = 7


SEVERITY_NAMES: Dict[str, Severity] = {
    "emerg": Severity.EMERG,
    "panic": Severity.EMERG,
    "alert": Severity.ALERT,
    "crit": Severity.CRIT,
    "critical": Severity.CRIT,
    "err": Severity.ERR,
    "error": Severity.ERR,
    "warn": Severity.WARNING,
    "warning": Severity.WARNING,
    "notice": Severity.NOTICE,
    "info": Severity.INFO,
    "informational": Severity.INFO,
    "debug": Severity.DEBUG,
}

FACILITIES: Dict[str, int] = {
    "kern": 0,
    "user": 1,
    "mail": 2,
    "daemon": 3,
    "auth": 4,
    "syslog": 5,
    "lpr": 6,
    "news": 7,
    "uucp": 8,
    "clock": 9,
    "authpriv": 10,
    "ftp": 11,
    "ntp": 12,
    "log_audit": 13,
    "log_alert": 14,
    "cron": 15,
    "local0": 16,
    "local1": 17,
    "local2": 18,
    "local3": 19,
    "local4": 20,
    "local5": 21,
    "local6": 22,
    "local7": 23,
}

# Evaluated top-down, first match wins; anything below DEBUG is syslog debug.
_LEVEL_THRESHOLDS = (
    (ApplicationLevel.FATAL, Severity.EMERG),
    (ApplicationLevel.ERROR, Severity.ERR),
    (ApplicationLevel.WARN, Severity.WARNING),
    (ApplicationLevel.INFO, Severity.NOTICE),
    (ApplicationLevel.DEBUG, Severity.INFO),
)


def parse_application_level(level: Any) -> int:
    """
    Parse an application level given as a number or a case-insensitive name.

    String levels are read by name, else by their leading integer ("45.5"
    is 45).

    Anything that cannot be read as a level (unknown names, NaN, booleans,
    containers, None) is treated as INFO.
    """
    if isinstance(level, bool):
        return ApplicationLevel.INFO.value
    if isinstance(level, int):
        return level
    if isinstance(level, float):
        return int(level) if math.isfinite(level) else ApplicationLevel.INFO.value
    if isinstance(level, str):
        name = level.strip().upper()
        if name in ApplicationLevel.__members__:
            return ApplicationLevel[name].value
        match = _LEADING_INTEGER.match(name)
        if match:
            return int(match.group(1))
        return ApplicationLevel.INFO.value
    return ApplicationLevel.INFO.value


def map_application_level(level: Any) -> Severity:
    """
    Map an application level onto the syslog severity scale.

    Args:
        level: An integer level, a level name, or anything else (treated as INFO)

    Returns:
        The matching syslog severity
    """
    value = parse_application_level(level)
    for threshold, severity in _LEVEL_THRESHOLDS:
        if value >= threshold:
            return severity
    return Severity.DEBUG


def severity_from_name(value: Any) -> Optional[Severity]:
    """Resolve a severity given by name or number, or None if it is not one."""
    if isinstance(value, Severity):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Severity(value) if 0 <= value <= 7 else None
    if isinstance(value, str):
        return SEVERITY_NAMES.get(value.strip().lower())
    return None


def facility_from_name(value: Any) -> Optional[int]:
    """Resolve a facility given by name or number, or None if it is not one."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value if 0 <= value <= 23 else None
    if isinstance(value, str):
        return FACILITIES.get(value.strip().lower())
    return None
