# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Record-by-record stream driver
#
# Feeds records to a SyslogEncoder strictly in arrival order and hands back one
# syslog line per record.

# Standard library imports
import logging

from typing import IO, Any, Iterable, Iterator, Optional, Union

# Local/package imports
from ziggiz_courier_syslog_stream.config import Config
from ziggiz_courier_syslog_stream.encoding.encoder import SyslogEncoder


class SyslogStream:
    """
    Stream transform from application log records to syslog lines.
    """

    def __init__(
        self, config: Optional[Config] = None, encoder: Optional[SyslogEncoder] = None
    ):
        """
        Initialize the stream.

        Args:
            config: Encoder configuration, used when no encoder is given
            encoder: The encoder to use (default: SyslogEncoder(config))
        """
        self.logger = logging.getLogger("ziggiz_courier_syslog_stream.stream")
        self.config = config or Config()
        self.encoder = encoder or SyslogEncoder(self.config)
        self.records_encoded = 0

    def write(self, record: Any) -> str:
        """Encode one record and return its line."""
        line = self.encoder.encode(record)
        self.records_encoded += 1
        return line

    def transform(self, records: Iterable[Any]) -> Iterator[str]:
        """Lazily encode records, yielding one line per record in order."""
        for record in records:
            yield self.write(record)

    def pipe(self, source: IO, sink: IO) -> int:
        """
        Encode each line of a source as one record and write the lines to a sink.

        A blank source line is encoded as an empty plain-text record, so the
        sink gets exactly one line per source line.

        Args:
            source: Text or binary stream, one record per line
            sink: Text stream receiving the syslog lines

        Returns:
            The number of lines written
        """
        written = 0
        for raw in source:
            record: Union[str, bytes] = (
                raw.rstrip(b"\r\n") if isinstance(raw, bytes) else raw.rstrip("\r\n")
            )
            sink.write(self.write(record))
            written += 1
        sink.flush()
        self.logger.debug("Stream drained", extra={"lines_written": written})
        return written
