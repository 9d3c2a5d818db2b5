# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# RFC 5424 STRUCTURED-DATA validation and rendering
#
# The validator splits a mapping of candidate fields into:
#   - data: SD elements to emit, well-known SD-IDs first, then custom
#     "<key>@<PEN>" elements in source key order
#   - extra: everything that cannot be emitted as structured data; the encoder
#     appends it to the message as JSON
# Well-known elements are validated all-or-nothing. Custom elements are decided
# per key and do not depend on that outcome.

# Standard library imports
import logging

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

# Third-party imports
from pydantic import ValidationError

# Local/package imports
from ziggiz_courier_syslog_stream.encoding import safe_json
from ziggiz_courier_syslog_stream.encoding.schemas import (
    WELL_KNOWN_SD_IDS,
    StructuredDataSchema,
)
from ziggiz_courier_syslog_stream.encoding.validators import (
    MAX_SD_NAME_LENGTH,
    is_sd_name,
)
from ziggiz_courier_syslog_stream.errors import (
    ValidationFailure,
    describe_validation_error,
    failure_kind_for,
)

NILVALUE = "-"
SD_VALIDATION_ERROR = "SD_VALIDATION_ERROR"


def escape_param_value(value: str) -> str:
    """Escape a PARAM-VALUE (RFC 5424 section 6.3.3)."""
    return value.replace("\\", "\\\\").replace('"', '\\"').replace("]", "\\]")


def param_value(value: Any) -> str:
    """Stringify a scalar parameter value."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, datetime):
        return safe_json.format_datetime(value)
    if isinstance(value, (Mapping, list, tuple, set)):
        return safe_json.dumps(value)
    return str(value)


def build_params(values: Mapping) -> List[Tuple[str, str]]:
    """Turn a mapping into (name, value) pairs; list values repeat the name."""
    params = []
    for name, value in values.items():
        if isinstance(value, (list, tuple)):
            params.extend((name, param_value(item)) for item in value)
        else:
            params.append((name, param_value(value)))
    return params


@dataclass
class StructuredDataElement:
    """
    One SD-ELEMENT: an SD-ID and its ordered parameters.

    Attributes:
        sd_id (str): Element identifier, e.g. "origin" or "data@32473".
        params (list): Ordered (PARAM-NAME, PARAM-VALUE) pairs, values unescaped.
    """

    sd_id: str
    params: List[Tuple[str, str]] = field(default_factory=list)

    def render(self) -> str:
        """Render the element as '[SD-ID name="value" ...]'."""
        parts = [self.sd_id]
        parts.extend(
            f'{name}="{escape_param_value(value)}"' for name, value in self.params
        )
        return "[" + " ".join(parts) + "]"


# SD-ID -> element, in emission order
StructuredDataSet = Dict[str, StructuredDataElement]


def render_structured_data(data: Optional[StructuredDataSet]) -> str:
    """Render a structured data set, or the NILVALUE when there is none."""
    if not data:
        return NILVALUE
    return "".join(element.render() for element in data.values())


@dataclass
class StructuredDataResult:
    """
    Outcome of validating structured data candidates.

    Attributes:
        data: Elements to emit, or None when there are none.
        extra: Fields to append to the message as JSON, or None when there are none.
        failure: Why the well-known elements were rejected, if they were.
    """

    data: Optional[StructuredDataSet] = None
    extra: Optional[Dict[str, Any]] = None
    failure: Optional[ValidationFailure] = None


class StructuredDataValidator:
    """
    Validates structured data candidates and builds the elements to emit.

    Custom elements are only produced when a private enterprise number is
    configured; without one every unknown key becomes extra data.
    """

    def __init__(self, private_enterprise_number: Optional[int] = None):
        """
        Initialize the validator.

        Args:
            private_enterprise_number: IANA PEN used to qualify custom SD-IDs
        """
        self.private_enterprise_number = private_enterprise_number
        self.logger = logging.getLogger(
            "ziggiz_courier_syslog_stream.encoding.structured_data"
        )

    def validate(self, fields: Mapping) -> StructuredDataResult:
        """
        Split candidate fields into structured data and extra data.

        Args:
            fields: Mapping of candidate keys to values; not modified

        Returns:
            A StructuredDataResult; data and extra are None when empty
        """
        data: StructuredDataSet = {}
        extra: Dict[str, Any] = {}
        failure = None

        try:
            schema = StructuredDataSchema.model_validate(dict(fields))
        except ValidationError as exc:
            failure = ValidationFailure(
                failure_kind_for(exc), describe_validation_error(exc)
            )
            extra[SD_VALIDATION_ERROR] = failure.message
            self.logger.debug(
                "Structured data rejected",
                extra={"failure_kind": failure.kind.value, "error": failure.message},
            )
        else:
            dumped = schema.model_dump(by_alias=True, exclude_unset=True)
            for sd_id, params in dumped.items():
                data[sd_id] = StructuredDataElement(sd_id, build_params(params))

        for key, value in fields.items():
            if key in WELL_KNOWN_SD_IDS:
                continue
            element = self.custom_element(key, value)
            if element is None:
                extra[key] = value
            else:
                data[element.sd_id] = element

        return StructuredDataResult(data or None, extra or None, failure)

    def custom_element(self, key: Any, value: Any) -> Optional[StructuredDataElement]:
        """
        Build a "<key>@<PEN>" element, or return None if the pair must stay extra data.

        The key must be a legal SD-NAME and the qualified SD-ID must fit in 32
        characters. A mapping value must have legal PARAM-NAMEs as keys; a list
        value becomes parameters repeating the key as their name.
        """
        pen = self.private_enterprise_number
        if not pen or not is_sd_name(key):
            return None
        if isinstance(value, (list, tuple)):
            value = {key: value}
        elif not isinstance(value, Mapping):
            return None

        sd_id = f"{key}@{pen}"
        if len(sd_id) > MAX_SD_NAME_LENGTH:
            return None
        if not all(is_sd_name(name) for name in value):
            return None

        return StructuredDataElement(sd_id, build_params(value))
