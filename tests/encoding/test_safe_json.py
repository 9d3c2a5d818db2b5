# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Tests for JSON rendering of arbitrary values

# Standard library imports
from datetime import date, datetime, timedelta, timezone

# Third-party imports
import pytest

# Local/package imports
from ziggiz_courier_syslog_stream.encoding.safe_json import (
    CIRCULAR,
    dumps,
    format_datetime,
)


@pytest.mark.unit
def test_compact_output():
    assert dumps({"msg": "foo", "n": [1, 2]}) == '{"msg":"foo","n":[1,2]}'
    assert dumps([None, "foo"]) == '[null,"foo"]'
    assert dumps(True) == "true"
    assert dumps(123) == "123"


@pytest.mark.unit
def test_non_ascii_kept():
    assert dumps({"name": "Zürich"}) == '{"name":"Zürich"}'


@pytest.mark.unit
def test_self_reference_is_flagged():
    obj = {}
    obj["foo"] = obj
    assert dumps(obj) == '{"foo":"[Circular]"}'


@pytest.mark.unit
def test_nested_cycle_is_flagged():
    inner = []
    outer = {"list": inner}
    inner.append(outer)
    assert dumps(outer) == '{"list":["%s"]}' % CIRCULAR


@pytest.mark.unit
def test_datetimes_render_as_utc_iso():
    value = datetime(2024, 3, 1, 12, 30, 45, 123456, tzinfo=timezone.utc)
    assert dumps(value) == '"2024-03-01T12:30:45.123Z"'
    assert dumps(date(2024, 3, 1)) == '"2024-03-01"'


@pytest.mark.unit
def test_format_datetime_converts_to_utc():
    value = datetime(2024, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert format_datetime(value) == "2024-03-01T12:00:00.000Z"
    assert format_datetime(datetime(2024, 3, 1)) == "2024-03-01T00:00:00.000Z"


@pytest.mark.unit
def test_unrepresentable_values():
    assert dumps(float("inf")) == "null"
    assert dumps(b"foo") == "[102,111,111]"
    assert dumps({1: object}).startswith('{"1":"<class')
