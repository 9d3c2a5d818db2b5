# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# ziggiz_courier_syslog_stream package
#
# This is the package initializer for the Ziggiz Courier syslog stream encoder.
# It turns application log records (plain text, bunyan-style and glossy-style
# objects) into RFC 5424 or RFC 3164 syslog lines.
