# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Record schemas for classifying and validating application log records
#
# Three families of schema live here:
#   - LogRecord: bunyan-style records ("msg" field), unknown keys allowed
#   - WireRecord: glossy-style records ("message" field), unknown keys forbidden
#   - StructuredDataSchema: the RFC 5424 well-known SD-IDs timeQuality, origin
#     and meta (section 7), unknown keys stripped
#
# Field names follow Python conventions; the record keys are matched through
# aliases, so error locations and dumps use the keys as they appear on the wire.

# Standard library imports
from datetime import datetime
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

# Third-party imports
from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError

# Local/package imports
from ziggiz_courier_syslog_stream.encoding.severity import (
    facility_from_name,
    severity_from_name,
)
from ziggiz_courier_syslog_stream.encoding.validators import (
    is_hostname,
    is_language_tag,
)

MAX_SEQUENCE_ID = 2147483647


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass; records must carry real numbers
    if isinstance(value, bool):
        raise PydanticCustomError("int_type", "must be a number")
    return value


def _check_hostname(value: str) -> str:
    if not is_hostname(value):
        raise PydanticCustomError("hostname", "must be a valid hostname")
    return value


def _check_facility(value: str) -> str:
    if facility_from_name(value) is None:
        raise PydanticCustomError("facility", "must be a known syslog facility")
    return value.lower()


def _check_severity(value: str) -> str:
    if severity_from_name(value) is None:
        raise PydanticCustomError("severity", "must be a known syslog severity")
    return value.lower()


Text = Annotated[str, StringConstraints(min_length=1)]
Hostname = Annotated[str, AfterValidator(_check_hostname)]
FacilityName = Annotated[str, AfterValidator(_check_facility)]
SeverityName = Annotated[str, AfterValidator(_check_severity)]
NonNegative = Annotated[int, BeforeValidator(_reject_bool), Field(ge=0)]
Flag = Annotated[int, BeforeValidator(_reject_bool), Field(ge=0, le=1)]
LevelNumber = Annotated[int, BeforeValidator(_reject_bool), Field(ge=0, le=100)]
SequenceId = Annotated[
    int, BeforeValidator(_reject_bool), Field(ge=1, le=MAX_SEQUENCE_ID)
]
EnterpriseId = Annotated[str, StringConstraints(pattern=r"^\d+(\.\d+)*$")]
SoftwareText = Annotated[str, StringConstraints(min_length=1, max_length=48)]


class SchemaModel(BaseModel):
    """
    Base for all record schemas.

    Every declared field is optional unless stated otherwise, but a key that is
    present must not be null.
    """

    @field_validator("*", mode="before")
    @classmethod
    def reject_null(cls, value: Any) -> Any:
        """Treat an explicit null as a violation rather than as 'absent'."""
        if value is None:
            raise PydanticCustomError("null", "must not be null")
        return value


class LogRecord(SchemaModel):
    """
    Bunyan-style log record.

    Attributes:
        v (int): Record format version.
        level (int): Severity, already mapped onto the syslog scale.
        name (str): Application name.
        hostname (str): Hostname or IP address of the producer.
        pid (int): Process id.
        time (datetime | str): Record time; strings are parsed when rendering,
            false or unparseable values render as the NILVALUE.
        msg (str): Message text.
    """

    model_config = ConfigDict(extra="allow")

    v: Optional[NonNegative] = None
    level: Optional[LevelNumber] = None
    name: Optional[Text] = None
    hostname: Optional[Hostname] = None
    pid: Optional[NonNegative] = None
    time: Optional[Union[datetime, Literal[False], Text]] = None
    msg: Text


class WireRecord(SchemaModel):
    """
    Glossy-style record, shaped like the fields of a syslog line.

    Any key outside the declared ones fails validation.
    """

    model_config = ConfigDict(extra="forbid")

    facility: Optional[FacilityName] = None
    severity: Optional[SeverityName] = None
    host: Optional[Hostname] = None
    app_name: Optional[Text] = Field(None, alias="appName")
    pid: Optional[NonNegative] = None
    date: Optional[Union[datetime, Literal[False]]] = None
    message: Text
    structured_data: Optional[Dict[str, Any]] = Field(None, alias="structuredData")


class TimeQuality(SchemaModel):
    """timeQuality SD-ID (RFC 5424 section 7.1)."""

    tz_known: Optional[Flag] = Field(None, alias="tzKnown")
    is_synced: Optional[Flag] = Field(None, alias="isSynced")
    sync_accuracy: Optional[NonNegative] = Field(None, alias="syncAccuracy")

    @field_validator("sync_accuracy")
    @classmethod
    def forbid_accuracy_when_unsynced(cls, value: int, info: ValidationInfo) -> int:
        """syncAccuracy may only be given for a synchronized clock."""
        if not info.data.get("is_synced"):
            raise PydanticCustomError("not_allowed", "is not allowed")
        return value


class Origin(SchemaModel):
    """origin SD-ID (RFC 5424 section 7.2)."""

    ip: Optional[List[str]] = None
    enterprise_id: Optional[EnterpriseId] = Field(None, alias="enterpriseId")
    software: Optional[SoftwareText] = None
    sw_version: Optional[SoftwareText] = Field(None, alias="swVersion")

    @field_validator("ip", mode="before")
    @classmethod
    def check_ip(cls, value: Any) -> List[str]:
        """Accept one hostname/IP or a sequence of them, keeping their order."""
        addresses = [value] if isinstance(value, str) else value
        if not isinstance(addresses, (list, tuple)):
            raise PydanticCustomError("hostname", "must be a valid hostname")
        for address in addresses:
            if not is_hostname(address):
                raise PydanticCustomError("hostname", "must be a valid hostname")
        return list(addresses)


class Meta(SchemaModel):
    """meta SD-ID (RFC 5424 section 7.3)."""

    sequence_id: Optional[SequenceId] = Field(None, alias="sequenceId")
    sys_up_time: Optional[NonNegative] = Field(None, alias="sysUpTime")
    language: Optional[str] = None

    @field_validator("language", mode="before")
    @classmethod
    def check_language(cls, value: Any) -> str:
        """The language must be a registered BCP-47 tag."""
        if not is_language_tag(value):
            raise PydanticCustomError("invalid_language_tag", "Invalid language tag")
        return value


class StructuredDataSchema(SchemaModel):
    """The well-known structured data elements; unknown keys are ignored."""

    time_quality: Optional[TimeQuality] = Field(None, alias="timeQuality")
    origin: Optional[Origin] = None
    meta: Optional[Meta] = None


WELL_KNOWN_SD_IDS = ("timeQuality", "origin", "meta")
