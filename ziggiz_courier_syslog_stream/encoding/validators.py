# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Syntax checks for hostnames, IP addresses, SD-NAMEs and language tags

# Standard library imports
import ipaddress
import re

from typing import Any

# Third-party imports
from language_tags import tags

MAX_HOSTNAME_LENGTH = 255
MAX_SD_NAME_LENGTH = 32

# RFC 1123 label: alphanumeric at both ends, hyphens allowed inside
_HOSTNAME_LABEL = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9-]{0,61}[A-Za-z0-9])?$")

# SD-NAME excludes '=', SP, ']', '"' and, for SD-IDs we build, '@'
_INVALID_SD_NAME = re.compile(r'[^\x21-\x7e]|[@=\]"]')


def is_ip_address(value: str) -> bool:
    """Check whether a string is an IPv4 or IPv6 address."""
    try:
        ipaddress.ip_address(value)
    except ValueError:
        return False
    return True


def is_hostname(value: Any) -> bool:
    """
    Check whether a value is a syntactically valid hostname or IP address.

    Args:
        value: The value to check

    Returns:
        True for RFC 1123 hostnames and IPv4/IPv6 addresses, False otherwise
    """
    if not isinstance(value, str) or not value:
        return False
    if is_ip_address(value):
        return True
    if len(value) > MAX_HOSTNAME_LENGTH:
        return False
    return all(_HOSTNAME_LABEL.match(label) for label in value.split("."))


def is_sd_name(value: Any) -> bool:
    """Check whether a value can be used as an SD-NAME (SD-ID or PARAM-NAME)."""
    return (
        isinstance(value, str)
        and 0 < len(value) <= MAX_SD_NAME_LENGTH
        and not _INVALID_SD_NAME.search(value)
    )


def is_language_tag(value: Any) -> bool:
    """Check a value against the BCP-47 language subtag registry."""
    if not isinstance(value, str) or not value:
        return False
    return bool(tags.check(value))
