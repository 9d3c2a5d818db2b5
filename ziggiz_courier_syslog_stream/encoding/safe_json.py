# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# JSON rendering that tolerates self-referential values

# Standard library imports
import json
import math

from collections.abc import Mapping
from datetime import date, datetime, timezone
from typing import Any, Set

CIRCULAR = "[Circular]"
UNSERIALIZABLE = "[Unserializable]"


def format_datetime(value: datetime) -> str:
    """Format a datetime as an RFC 3339 UTC timestamp with millisecond precision."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _json_key(key: Any) -> Any:
    if isinstance(key, (str, int, float, bool)) or key is None:
        return key
    return str(key)


def _prepare(value: Any, seen: Set[int]) -> Any:
    """Convert a value into plain JSON types, marking revisited containers."""
    if isinstance(value, (str, bool, int)) or value is None:
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, datetime):
        return format_datetime(value)
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray)):
        return list(value)

    if isinstance(value, (Mapping, list, tuple, set, frozenset)):
        if id(value) in seen:
            return CIRCULAR
        seen.add(id(value))
        if isinstance(value, Mapping):
            return {_json_key(k): _prepare(v, seen) for k, v in value.items()}
        return [_prepare(item, seen) for item in value]

    return str(value)


def dumps(value: Any) -> str:
    """
    Render any value as compact JSON text.

    Every container is visited at most once per call; a container reached a
    second time is rendered as the string "[Circular]" instead of being
    recursed into, so self-referential values terminate.

    Args:
        value: The value to render

    Returns:
        JSON text such as '{"foo":"[Circular]"}'
    """
    return json.dumps(
        _prepare(value, set()), ensure_ascii=False, separators=(",", ":")
    )
