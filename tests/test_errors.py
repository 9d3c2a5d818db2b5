# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Tests for the failure taxonomy and error message rendering

# Third-party imports
import pytest

from pydantic import BaseModel, ConfigDict, ValidationError

# Local/package imports
from ziggiz_courier_syslog_stream.errors import (
    FailureKind,
    ValidationFailure,
    describe_error,
    describe_validation_error,
)


class _Strict(BaseModel):
    model_config = ConfigDict(extra="forbid")

    count: int


def _error(**data):
    with pytest.raises(ValidationError) as exc_info:
        _Strict(**data)
    return exc_info.value


@pytest.mark.unit
def test_extra_field():
    assert describe_validation_error(_error(count=1, other=2)) == '"other" is not allowed'


@pytest.mark.unit
def test_missing_field():
    assert describe_validation_error(_error()) == '"count" is required'


@pytest.mark.unit
def test_should_becomes_must():
    message = describe_validation_error(_error(count="x"))
    assert message.startswith('"count" must be a valid integer')


@pytest.mark.unit
def test_bare_message_types():
    error = {"type": "invalid_language_tag", "loc": ("meta", "language"), "msg": "Invalid language tag"}
    assert describe_error(error) == "Invalid language tag"


@pytest.mark.unit
def test_field_name_skips_indexes():
    error = {"type": "hostname", "loc": ("origin", "ip", 1), "msg": "must be a valid hostname"}
    assert describe_error(error) == '"ip" must be a valid hostname'
    assert describe_error({"type": "x", "loc": (), "msg": "is odd"}) == '"value" is odd'


@pytest.mark.unit
def test_failure_value():
    failure = ValidationFailure(FailureKind.DECODE_FAILURE, "bad json")
    assert failure.kind.value == "decode_failure"
    with pytest.raises(AttributeError):
        failure.message = "other"
