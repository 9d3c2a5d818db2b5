# -*- coding: utf-8 -*-
# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# OpenTelemetry setup for the Ziggiz Courier syslog stream encoder
#
# Spans are recorded through the OpenTelemetry API. Until configure_tracing() is
# called no provider is installed and spans are no-ops. The console exporter
# writes to stderr because stdout carries the encoded syslog lines.

# Standard library imports
import sys

from typing import IO, Optional

# Third-party imports
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Tracer

SERVICE_NAME = "ziggiz-courier-syslog-stream"


def configure_tracing(out: Optional[IO[str]] = None) -> TracerProvider:
    """
    Install a tracer provider that exports spans to the console.

    Args:
        out: Stream for exported spans (default: stderr)

    Returns:
        The installed tracer provider
    """
    resource = Resource.create({"service.name": SERVICE_NAME})
    tracer_provider = TracerProvider(resource=resource)
    span_processor = BatchSpanProcessor(ConsoleSpanExporter(out=out or sys.stderr))
    tracer_provider.add_span_processor(span_processor)
    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def get_tracer() -> Tracer:
    return trace.get_tracer(SERVICE_NAME)
