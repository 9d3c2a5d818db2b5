# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Record classification
#
# Decides which encoding path applies to a record. The checks run in a fixed
# order and the first one that accepts the record wins:
#   1. plain text      - the record is a string
#   2. bunyan style    - a mapping with a "msg" field that passes LogRecord
#   3. glossy style    - a mapping with a "message" field that passes WireRecord
#   4. JSON fallback   - everything else, rendered from the original record
# Each check is a separate function returning a ClassifiedRecord, a
# ValidationFailure, or None when the record does not have the required shape.

# Standard library imports
import json
import logging

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple, Union

# Third-party imports
from pydantic import ValidationError

# Local/package imports
from ziggiz_courier_syslog_stream.encoding.schemas import LogRecord, WireRecord
from ziggiz_courier_syslog_stream.encoding.severity import map_application_level
from ziggiz_courier_syslog_stream.errors import (
    FailureKind,
    ValidationFailure,
    describe_validation_error,
)

logger = logging.getLogger("ziggiz_courier_syslog_stream.encoding.classifier")


class Classification(Enum):
    """Enumeration of the encoding paths."""

    PLAIN_TEXT = "plain_text"
    BUNYAN_STYLE = "bunyan_style"
    GLOSSY_STYLE = "glossy_style"
    JSON_FALLBACK = "json_fallback"


@dataclass(frozen=True)
class ClassifiedRecord:
    """
    A record together with the encoding path chosen for it.

    Attributes:
        classification (Classification): The chosen path.
        value (Any): Path-specific value: the text, the validated LogRecord or
            WireRecord, or the original record for the JSON fallback.
        fields (dict): For bunyan-style records, the record fields with the
            level already mapped to a syslog severity.
        failures (tuple): Validation failures of the paths tried before this one.
    """

    classification: Classification
    value: Any
    fields: Optional[dict] = None
    failures: Tuple[ValidationFailure, ...] = field(default_factory=tuple)


ArmResult = Union[ClassifiedRecord, ValidationFailure, None]


def normalize(
    record: Any, decode_buffers: bool = False, decode_json: bool = False
) -> Tuple[Any, List[ValidationFailure]]:
    """
    Apply the optional byte and JSON decode steps.

    A decode step that fails keeps the previous representation.

    Args:
        record: The raw record
        decode_buffers: Decode bytes to text (UTF-8, invalid bytes replaced)
        decode_json: Parse text (or bytes) as JSON

    Returns:
        The normalized record and the decode failures encountered
    """
    failures = []
    if decode_buffers and isinstance(record, (bytes, bytearray)):
        record = bytes(record).decode("utf-8", errors="replace")

    if decode_json and isinstance(record, (str, bytes, bytearray)):
        try:
            record = json.loads(record)
        except (ValueError, RecursionError) as exc:
            failures.append(ValidationFailure(FailureKind.DECODE_FAILURE, str(exc)))

    return record, failures


def classify_plain_text(record: Any) -> ArmResult:
    """Accept any string as plain text."""
    if isinstance(record, str):
        return ClassifiedRecord(Classification.PLAIN_TEXT, record)
    return None


def classify_bunyan(record: Any) -> ArmResult:
    """
    Accept a mapping with a "msg" field that passes the log record schema.

    The level is mapped to a syslog severity before validation; unknown keys
    are allowed.
    """
    if not isinstance(record, Mapping) or not record.get("msg"):
        return None

    fields = dict(record)
    fields["level"] = int(map_application_level(record.get("level")))
    try:
        model = LogRecord.model_validate(fields)
    except ValidationError as exc:
        return ValidationFailure(
            FailureKind.SCHEMA_VIOLATION, describe_validation_error(exc)
        )
    return ClassifiedRecord(Classification.BUNYAN_STYLE, model, fields)


def classify_glossy(record: Any) -> ArmResult:
    """Accept a mapping with a "message" field that passes the wire record schema."""
    if not isinstance(record, Mapping) or not record.get("message"):
        return None

    try:
        model = WireRecord.model_validate(dict(record))
    except ValidationError as exc:
        return ValidationFailure(
            FailureKind.SCHEMA_VIOLATION, describe_validation_error(exc)
        )
    return ClassifiedRecord(Classification.GLOSSY_STYLE, model)


_ARMS = (classify_plain_text, classify_bunyan, classify_glossy)


def classify(
    record: Any, original: Any = None, failures: Optional[List[ValidationFailure]] = None
) -> ClassifiedRecord:
    """
    Choose the encoding path for a normalized record.

    Args:
        record: The normalized record
        original: The record as received, before decoding; used by the JSON
            fallback (defaults to record)
        failures: Failures collected before classification, e.g. decode failures

    Returns:
        The classified record; never raises for validation problems
    """
    collected = list(failures or ())
    for arm in _ARMS:
        result = arm(record)
        if isinstance(result, ClassifiedRecord):
            return ClassifiedRecord(
                result.classification, result.value, result.fields, tuple(collected)
            )
        if isinstance(result, ValidationFailure):
            logger.debug(
                "Record rejected by encoding path",
                extra={"path": arm.__name__, "error": result.message},
            )
            collected.append(result)

    return ClassifiedRecord(
        Classification.JSON_FALLBACK,
        record if original is None else original,
        failures=tuple(collected),
    )
