# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Pytest configuration file

# Standard library imports
import logging

# Third-party imports
import pytest

# Local/package imports
from ziggiz_courier_syslog_stream.config import Config
from ziggiz_courier_syslog_stream.encoding.encoder import SyslogEncoder


# Define test categories
def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line(
        "markers", "integration: mark a test as an integration test"
    )


@pytest.fixture(autouse=True)
def reset_logging():
    """Reset logging configuration after each test."""
    yield
    # Reset root logger after each test
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.WARNING)  # Default level


@pytest.fixture
def identity():
    """Fixed header identity so encoded lines do not depend on the host."""
    return {
        "hostname": "testhost",
        "app_name": "testapp",
        "pid": 4242,
    }


@pytest.fixture
def make_encoder(identity):
    """Factory for encoders with a fixed identity and optional overrides."""

    def factory(**overrides):
        return SyslogEncoder(Config(**{**identity, **overrides}))

    return factory
