# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Syslog header assembly
#
# Produces the header of a syslog line in one of two formats:
#   - rfc5424: <PRI>1 TIMESTAMP HOSTNAME APP-NAME PROCID MSGID
#   - rfc3164: <PRI>Mmm dd hh:mm:ss HOSTNAME APP-NAME[PROCID]:
# Header fields are reduced to printable US-ASCII; missing values become the
# NILVALUE "-".

# Standard library imports
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

# Local/package imports
from ziggiz_courier_syslog_stream.encoding.safe_json import format_datetime

NILVALUE = "-"
VERSION = 1

MAX_HOSTNAME_LENGTH = 255
MAX_APP_NAME_LENGTH = 48
MAX_PROCID_LENGTH = 128
MAX_MSGID_LENGTH = 32

_MONTHS = (
    "Jan",
    "Feb",
    "Mar",
    "Apr",
    "May",
    "Jun",
    "Jul",
    "Aug",
    "Sep",
    "Oct",
    "Nov",
    "Dec",
)


class SyslogFormat(Enum):
    """Enumeration of the supported syslog line formats."""

    RFC5424 = "rfc5424"
    RFC3164 = "rfc3164"


def resolve_timestamp(value: Any) -> Optional[datetime]:
    """
    Resolve a record time into an aware UTC datetime.

    None means "now". Datetimes are taken as-is (naive ones as UTC), numbers as
    epoch milliseconds and strings as ISO-8601. Anything else, including
    explicitly falsy values and unparseable strings, resolves to None, which
    renders as the NILVALUE.
    """
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if not value or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
        return resolve_timestamp(parsed)
    return None


def format_timestamp(value: Any) -> str:
    """Render a record time as an RFC 5424 TIMESTAMP or the NILVALUE."""
    resolved = resolve_timestamp(value)
    if resolved is None:
        return NILVALUE
    return format_datetime(resolved)


def format_bsd_timestamp(value: Any) -> str:
    """Render a record time as an RFC 3164 TIMESTAMP ("Oct  7 13:22:00")."""
    resolved = resolve_timestamp(value) or datetime.now(timezone.utc)
    return (
        f"{_MONTHS[resolved.month - 1]} {resolved.day:>2} "
        f"{resolved:%H:%M:%S}"
    )


def format_field(value: Any, max_length: int) -> str:
    """Reduce a header field to printable US-ASCII, or the NILVALUE if nothing is left."""
    if value is None or value == "":
        return NILVALUE
    sanitized = "".join(c for c in str(value) if 33 <= ord(c) <= 126)[:max_length]
    return sanitized or NILVALUE


def priority(facility: int, severity: int) -> int:
    """Compute PRI = facility * 8 + severity."""
    return facility * 8 + severity


class HeaderAssembler:
    """
    Assembles syslog lines from already resolved header values.

    The assembler does not choose severities or decide what structured data
    to emit; the encoder hands it final values.
    """

    def __init__(self, syslog_format: SyslogFormat = SyslogFormat.RFC5424):
        """
        Initialize the assembler.

        Args:
            syslog_format: Output format of the produced lines
        """
        self.syslog_format = syslog_format

    def assemble(
        self,
        facility: int,
        severity: int,
        hostname: Any = None,
        app_name: Any = None,
        pid: Any = None,
        timestamp: Any = None,
        msg_id: Any = None,
    ) -> str:
        """
        Build the header part of a syslog line.

        Args:
            facility: Numeric facility (0-23)
            severity: Numeric severity (0-7)
            hostname: HOSTNAME field
            app_name: APP-NAME field
            pid: PROCID field
            timestamp: Record time, see resolve_timestamp()
            msg_id: MSGID field (RFC 5424 only)

        Returns:
            The header text without a trailing space
        """
        pri = priority(facility, severity)
        if self.syslog_format == SyslogFormat.RFC3164:
            tag = format_field(app_name, MAX_APP_NAME_LENGTH)
            procid = format_field(pid, MAX_PROCID_LENGTH)
            if procid != NILVALUE:
                tag = f"{tag}[{procid}]"
            return (
                f"<{pri}>{format_bsd_timestamp(timestamp)} "
                f"{format_field(hostname, MAX_HOSTNAME_LENGTH)} {tag}:"
            )

        return " ".join(
            (
                f"<{pri}>{VERSION}",
                format_timestamp(timestamp),
                format_field(hostname, MAX_HOSTNAME_LENGTH),
                format_field(app_name, MAX_APP_NAME_LENGTH),
                format_field(pid, MAX_PROCID_LENGTH),
                format_field(msg_id, MAX_MSGID_LENGTH),
            )
        )

    def produce(self, header: str, structured_data: str, message: str) -> str:
        """
        Join header, STRUCTURED-DATA and MSG into one line (no line terminator).

        RFC 3164 lines carry no structured data field.
        """
        if self.syslog_format == SyslogFormat.RFC3164:
            parts = [header]
        else:
            parts = [header, structured_data]
        if message:
            parts.append(message)
        return " ".join(parts)
