# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Syslog message encoder
#
# Turns one application log record into one newline-terminated syslog line.
# The record is classified (see classifier.py), the matching build method
# resolves severity, header values, structured data and message text, and the
# header assembler renders the line. encode() never raises: any failure
# degrades to the JSON rendering of the record as received.

# Standard library imports
import logging

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Optional

# Local/package imports
from ziggiz_courier_syslog_stream.config import Config
from ziggiz_courier_syslog_stream.encoding import safe_json
from ziggiz_courier_syslog_stream.encoding.classifier import (
    Classification,
    ClassifiedRecord,
    classify,
    normalize,
)
from ziggiz_courier_syslog_stream.encoding.header import HeaderAssembler, SyslogFormat
from ziggiz_courier_syslog_stream.encoding.schemas import LogRecord, WireRecord
from ziggiz_courier_syslog_stream.encoding.severity import (
    FACILITIES,
    Severity,
    facility_from_name,
    severity_from_name,
)
from ziggiz_courier_syslog_stream.encoding.structured_data import (
    StructuredDataResult,
    StructuredDataSet,
    StructuredDataValidator,
    render_structured_data,
)
from ziggiz_courier_syslog_stream.telemetry import get_tracer

# Keys of a bunyan-style record that feed the header rather than structured data
BUNYAN_FIELDS = frozenset(
    {"v", "facility", "level", "hostname", "name", "pid", "time", "msg", "msgId"}
)


@dataclass(frozen=True)
class EncodedMessage:
    """
    Resolved content of one syslog line, before rendering.

    Attributes:
        facility (int): Numeric facility.
        severity (int): Numeric severity.
        hostname, app_name, pid, msg_id: Header values.
        timestamp (Any): Record time; None means now, see header.resolve_timestamp().
        structured_data (dict): Elements to emit, or None.
        message (str): MSG text including any appended extra data.
    """

    facility: int
    severity: int
    hostname: Any
    app_name: Any
    pid: Any
    msg_id: Any
    timestamp: Any
    structured_data: Optional[StructuredDataSet]
    message: str


class SyslogEncoder:
    """
    Encodes application log records as syslog lines.

    Configuration is read once at construction; encoding holds no state
    between records.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        assembler: Optional[HeaderAssembler] = None,
    ):
        """
        Initialize the encoder.

        Args:
            config: Encoder configuration (default: Config())
            assembler: Header assembler (default: one for the configured format)
        """
        self.logger = logging.getLogger("ziggiz_courier_syslog_stream.encoding.encoder")
        self.config = config or Config()
        self.syslog_format = SyslogFormat(self.config.syslog_format)
        self.assembler = assembler or HeaderAssembler(self.syslog_format)
        self.tracer = get_tracer()

        self.decode_buffers = self.config.decode_buffers
        self.decode_json = self.config.decode_json
        # RFC 3164 has no STRUCTURED-DATA field
        self.use_structured_data = (
            self.config.structured_data_enabled
            and self.syslog_format == SyslogFormat.RFC5424
        )
        self.validator = StructuredDataValidator(self.config.private_enterprise_number)

        self.default_severity = severity_from_name(self.config.default_severity)
        self.facility = FACILITIES[self.config.facility]
        self.hostname = self.config.resolve_hostname()
        self.app_name = self.config.resolve_app_name()
        self.pid = self.config.resolve_pid()
        self.msg_id = self.config.resolve_msg_id()

    def encode(self, record: Any) -> str:
        """
        Encode one record as a newline-terminated syslog line.

        Args:
            record: Text, bytes, or any structured value; not modified

        Returns:
            The syslog line
        """
        with self.tracer.start_as_current_span("syslog.encode") as span:
            try:
                normalized, failures = normalize(
                    record, self.decode_buffers, self.decode_json
                )
                classified = classify(normalized, record, failures)
                encoded = self.compose(classified)
                line = self.render(encoded)
            except Exception:
                self.logger.exception(
                    "Failed to encode record, falling back to JSON",
                    extra={"record_type": type(record).__name__},
                )
                classified = None
                encoded = self.build_fallback(record)
                line = self.render(encoded)

            span.set_attribute(
                "syslog.classification",
                classified.classification.value if classified else "error",
            )
            span.set_attribute("syslog.severity", int(encoded.severity))
            return line + "\n"

    def compose(self, classified: ClassifiedRecord) -> EncodedMessage:
        """Resolve the line content for a classified record."""
        if classified.classification == Classification.PLAIN_TEXT:
            return self.build_plain_text(classified.value)
        if classified.classification == Classification.BUNYAN_STYLE:
            return self.build_bunyan(classified.value, classified.fields or {})
        if classified.classification == Classification.GLOSSY_STYLE:
            return self.build_glossy(classified.value)

        if classified.failures:
            self.logger.debug(
                "Record encoded as JSON",
                extra={"errors": [failure.message for failure in classified.failures]},
            )
        return self.build_json(classified.value)

    def render(self, encoded: EncodedMessage) -> str:
        """Render resolved content as a syslog line without terminator."""
        header = self.assembler.assemble(
            facility=encoded.facility,
            severity=encoded.severity,
            hostname=encoded.hostname,
            app_name=encoded.app_name,
            pid=encoded.pid,
            timestamp=encoded.timestamp,
            msg_id=encoded.msg_id,
        )
        return self.assembler.produce(
            header, render_structured_data(encoded.structured_data), encoded.message
        )

    def structure(self, candidates: Optional[Mapping]) -> StructuredDataResult:
        """
        Split candidate fields into structured data and extra data.

        With structured data disabled every candidate is extra data.
        """
        if not candidates:
            return StructuredDataResult()
        if self.use_structured_data:
            return self.validator.validate(candidates)
        return StructuredDataResult(extra=dict(candidates))

    @staticmethod
    def append_extra(message: str, extra: Optional[Dict[str, Any]]) -> str:
        """Append extra data to the message text as JSON."""
        if not extra:
            return message
        return f"{message} {safe_json.dumps(extra)}"

    def _defaults(self, severity: int, message: str) -> EncodedMessage:
        return EncodedMessage(
            facility=self.facility,
            severity=severity,
            hostname=self.hostname,
            app_name=self.app_name,
            pid=self.pid,
            msg_id=self.msg_id,
            timestamp=None,
            structured_data=None,
            message=message,
        )

    def build_plain_text(self, text: str) -> EncodedMessage:
        """Plain text: the text itself at the default severity."""
        return self._defaults(self.default_severity, text)

    def build_json(self, value: Any) -> EncodedMessage:
        """JSON fallback: the JSON rendering of the value at the default severity."""
        return self._defaults(self.default_severity, safe_json.dumps(value))

    def build_bunyan(self, record: LogRecord, fields: Mapping) -> EncodedMessage:
        """
        Bunyan-style record: header values from the record, every other key
        is a structured data candidate.
        """
        remainder = {k: v for k, v in fields.items() if k not in BUNYAN_FIELDS}
        structured = self.structure(remainder)

        facility = facility_from_name(fields.get("facility"))
        msg_id = fields.get("msgId")
        return EncodedMessage(
            facility=self.facility if facility is None else facility,
            severity=Severity(record.level),
            hostname=record.hostname or self.hostname,
            app_name=record.name or self.app_name,
            pid=record.pid or self.pid,
            msg_id=msg_id if isinstance(msg_id, str) and msg_id else self.msg_id,
            timestamp=record.time,
            structured_data=structured.data,
            message=self.append_extra(record.msg, structured.extra),
        )

    def build_glossy(self, record: WireRecord) -> EncodedMessage:
        """Glossy-style record: header values and structured data from the record."""
        structured = self.structure(record.structured_data)

        severity = severity_from_name(record.severity) if record.severity else None
        facility = facility_from_name(record.facility) if record.facility else None
        return EncodedMessage(
            facility=self.facility if facility is None else facility,
            severity=self.default_severity if severity is None else severity,
            hostname=record.host or self.hostname,
            app_name=record.app_name or self.app_name,
            pid=record.pid or self.pid,
            msg_id=self.msg_id,
            timestamp=record.date,
            structured_data=structured.data,
            message=self.append_extra(record.message, structured.extra),
        )

    def build_fallback(self, record: Any) -> EncodedMessage:
        """Last resort: JSON of the record, or a JSON marker if even that fails."""
        try:
            return self.build_json(record)
        except Exception:
            self.logger.exception("Failed to render record as JSON")
            return self.build_plain_text(safe_json.dumps(safe_json.UNSERIALIZABLE))
