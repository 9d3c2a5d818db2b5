# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Tests for application level and syslog severity mapping

# Standard library imports
from datetime import datetime

# Third-party imports
import pytest

# Local/package imports
from ziggiz_courier_syslog_stream.encoding.severity import (
    FACILITIES,
    ApplicationLevel,
    Severity,
    facility_from_name,
    map_application_level,
    parse_application_level,
    severity_from_name,
)


@pytest.mark.unit
@pytest.mark.parametrize(
    "level, expected",
    [
        (ApplicationLevel.FATAL, Severity.EMERG),
        (ApplicationLevel.ERROR, Severity.ERR),
        (ApplicationLevel.WARN, Severity.WARNING),
        (ApplicationLevel.INFO, Severity.NOTICE),
        (ApplicationLevel.DEBUG, Severity.INFO),
        (ApplicationLevel.TRACE, Severity.DEBUG),
    ],
)
def test_named_levels(level, expected):
    """Each application level has a fixed syslog severity."""
    assert map_application_level(int(level)) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "level, expected",
    [
        (99, Severity.EMERG),
        (53, Severity.ERR),
        (42, Severity.WARNING),
        (31, Severity.NOTICE),
        (28, Severity.INFO),
        (11, Severity.DEBUG),
        (7, Severity.DEBUG),
        (-3, Severity.DEBUG),
        (45.9, Severity.WARNING),
        ("50", Severity.ERR),
        ("45.5", Severity.WARNING),
        (" 31 ", Severity.NOTICE),
    ],
)
def test_levels_between_names(level, expected):
    """Levels between the named ones fall to the next lower threshold."""
    assert map_application_level(level) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "level, expected",
    [
        ("Fatal", Severity.EMERG),
        ("Error", Severity.ERR),
        ("Warn", Severity.WARNING),
        ("infO", Severity.NOTICE),
        ("debuG", Severity.INFO),
        ("tracE", Severity.DEBUG),
    ],
)
def test_level_names_case_insensitive(level, expected):
    assert map_application_level(level) == expected


@pytest.mark.unit
@pytest.mark.parametrize(
    "level", [None, "foo", [], {}, datetime(2020, 1, 1), float("nan"), True]
)
def test_unreadable_levels_are_info(level):
    """Anything that is not a level maps like INFO, i.e. to notice."""
    assert parse_application_level(level) == ApplicationLevel.INFO
    assert map_application_level(level) == Severity.NOTICE


@pytest.mark.unit
def test_severity_from_name():
    assert severity_from_name("emerg") == Severity.EMERG
    assert severity_from_name("WARN") == Severity.WARNING
    assert severity_from_name("error") == Severity.ERR
    assert severity_from_name(6) == Severity.INFO
    assert severity_from_name("loud") is None
    assert severity_from_name(8) is None
    assert severity_from_name(True) is None


@pytest.mark.unit
def test_facility_from_name():
    assert len(FACILITIES) == 24
    assert facility_from_name("kern") == 0
    assert facility_from_name("LOCAL3") == 19
    assert facility_from_name("local7") == 23
    assert facility_from_name(4) == 4
    assert facility_from_name("local8") is None
    assert facility_from_name(24) is None
    assert facility_from_name(None) is None
