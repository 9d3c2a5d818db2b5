# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Failure taxonomy for the syslog encoding pipeline
#
# None of these failures escape the encoder: each one selects a fallback
# encoding. They are returned as values so every classification arm can be
# tested on its own.

# Standard library imports
import re

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

# Third-party imports
from pydantic import ValidationError

# Error types whose message is reported without the field name
BARE_ERROR_TYPES = {"invalid_language_tag"}

_ERROR_TYPE_MESSAGES = {
    "extra_forbidden": "is not allowed",
    "missing": "is required",
}

_SHOULD_PREFIX = re.compile(r"^(?:Input|String|Value) should\b")


class FailureKind(Enum):
    """Enumeration of the ways a record can fail an encoding path."""

    DECODE_FAILURE = "decode_failure"
    SCHEMA_VIOLATION = "schema_violation"
    STRUCTURED_DATA_VIOLATION = "structured_data_violation"
    LANGUAGE_TAG_INVALID = "language_tag_invalid"


@dataclass(frozen=True)
class ValidationFailure:
    """
    Result value describing why a record did not pass a validation step.

    Attributes:
        kind (FailureKind): Category of the failure.
        message (str): Human-readable description, e.g. '"ip" must be a valid hostname'.
    """

    kind: FailureKind
    message: str


def _field_name(error: Dict[str, Any]) -> str:
    for part in reversed(error.get("loc", ())):
        if isinstance(part, str):
            return part
    return "value"


def describe_error(error: Dict[str, Any]) -> str:
    """
    Render one pydantic error entry in the '"<field>" <reason>' form.

    Args:
        error: An entry of ValidationError.errors()

    Returns:
        The human-readable message
    """
    error_type = error.get("type", "")
    if error_type in BARE_ERROR_TYPES:
        return error["msg"]

    reason = _ERROR_TYPE_MESSAGES.get(error_type)
    if reason is None:
        reason = _SHOULD_PREFIX.sub("must", error.get("msg", "is invalid"))
    return f'"{_field_name(error)}" {reason}'


def describe_validation_error(exc: ValidationError) -> str:
    """Describe the first error of a pydantic ValidationError."""
    errors = exc.errors()
    if not errors:
        return str(exc)
    return describe_error(errors[0])


def failure_kind_for(exc: ValidationError) -> FailureKind:
    """Classify a structured-data ValidationError by its first error."""
    errors = exc.errors()
    if errors and errors[0].get("type") in BARE_ERROR_TYPES:
        return FailureKind.LANGUAGE_TAG_INVALID
    return FailureKind.STRUCTURED_DATA_VIOLATION
