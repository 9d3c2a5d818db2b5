# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Configuration module for loading and parsing configuration files

# Standard library imports
import json
import logging
import os
import re
import socket
import sys

from pathlib import Path
from typing import Any, List, Optional, Union

# Third-party imports
import yaml

from pydantic import (
    AliasChoices,
    BaseModel,
    Field,
    field_validator,
)

# Local/package imports
from ziggiz_courier_syslog_stream.encoding.severity import FACILITIES, SEVERITY_NAMES

NILVALUE = "-"

_SYSLOG_FORMAT_ALIASES = {"bsd": "rfc3164"}
_LEADING_INTEGER = re.compile(r"^\s*([+-]?\d+)")


class LoggerConfig(BaseModel):
    """
    Configuration for individual loggers.

    Attributes:
        name (str): Logger name.
        level (str): Logging level (default: "INFO").
        propagate (bool): Whether to propagate logs to parent (default: True).
    """

    name: str
    level: str = "INFO"
    propagate: bool = True


class Config(BaseModel):
    """
    Main configuration class for the Ziggiz Courier syslog stream encoder.

    The encoder reads this once at construction. Option names of the form used
    by JavaScript syslog streams (decodeJSON, PEN, appName, ...) are accepted as
    aliases of the Python field names.
    """

    # Input decoding
    decode_buffers: bool = Field(
        False, validation_alias=AliasChoices("decode_buffers", "decodeBuffers")
    )
    decode_json: bool = Field(
        False, validation_alias=AliasChoices("decode_json", "decodeJSON")
    )

    # Encoding
    syslog_format: str = Field(
        "rfc5424", validation_alias=AliasChoices("syslog_format", "type", "format")
    )
    use_structured_data: Optional[bool] = Field(
        None,
        validation_alias=AliasChoices("use_structured_data", "useStructuredData"),
    )  # None: on for rfc5424, off for the legacy rfc3164 format
    default_severity: str = Field(
        "notice",
        validation_alias=AliasChoices(
            "default_severity", "defaultSeverity", "defaultLevel"
        ),
    )
    private_enterprise_number: Optional[int] = Field(
        None,
        validation_alias=AliasChoices(
            "private_enterprise_number", "privateEnterpriseNumber", "PEN"
        ),
    )

    # Identity defaults; unset values fall back to the process identity
    facility: str = "local0"
    hostname: Optional[str] = Field(
        None, validation_alias=AliasChoices("hostname", "host")
    )
    app_name: Optional[str] = Field(
        None, validation_alias=AliasChoices("app_name", "appName", "name")
    )
    msg_id: Optional[str] = Field(
        None, validation_alias=AliasChoices("msg_id", "msgID", "msgId")
    )
    pid: Optional[int] = None

    # Tracing configuration
    enable_tracing: bool = False  # Export encode spans to stderr

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    loggers: List[LoggerConfig] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is a valid Python logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v

    @field_validator("syslog_format")
    @classmethod
    def validate_syslog_format(cls, v: str) -> str:
        """Validate that the syslog format is RFC 5424 or the legacy RFC 3164."""
        valid_formats = ["rfc5424", "rfc3164"]
        v = v.lower()
        v = _SYSLOG_FORMAT_ALIASES.get(v, v)
        if v not in valid_formats:
            raise ValueError(
                f"Invalid syslog format: {v}. Must be one of {valid_formats}"
            )
        return v

    @field_validator("default_severity")
    @classmethod
    def validate_default_severity(cls, v: str) -> str:
        """Validate that the default severity is a syslog severity name."""
        v = v.lower()
        if v not in SEVERITY_NAMES:
            raise ValueError(
                f"Invalid severity: {v}. Must be one of {sorted(SEVERITY_NAMES)}"
            )
        return v

    @field_validator("facility")
    @classmethod
    def validate_facility(cls, v: str) -> str:
        """Validate that the facility is a syslog facility name."""
        v = v.lower()
        if v not in FACILITIES:
            raise ValueError(
                f"Invalid facility: {v}. Must be one of {list(FACILITIES)}"
            )
        return v

    @field_validator("private_enterprise_number", mode="before")
    @classmethod
    def parse_private_enterprise_number(cls, v: Any) -> Optional[int]:
        """
        Read the leading integer of the value; anything else leaves the PEN unset.

        An unusable PEN disables custom structured data but is not an error.
        """
        if v is None or isinstance(v, bool):
            return None
        match = _LEADING_INTEGER.match(str(v))
        pen = int(match.group(1)) if match else 0
        if pen <= 0:
            logging.warning(
                "Ignoring invalid private enterprise number", extra={"pen": v}
            )
            return None
        return pen

    @property
    def structured_data_enabled(self) -> bool:
        """Structured data defaults to on, except for the legacy format."""
        if self.use_structured_data is None:
            return self.syslog_format == "rfc5424"
        return self.use_structured_data

    def resolve_hostname(self) -> str:
        """Configured hostname, else the machine hostname, else the NILVALUE."""
        return self.hostname or socket.gethostname() or NILVALUE

    def resolve_app_name(self) -> str:
        """Configured app name, else the program name, else the NILVALUE."""
        if self.app_name:
            return self.app_name
        program = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else ""
        return program or NILVALUE

    def resolve_pid(self) -> Union[int, str]:
        """Configured pid, else the current process id, else the NILVALUE."""
        return self.pid or os.getpid() or NILVALUE

    def resolve_msg_id(self) -> str:
        """Configured message id, else the NILVALUE."""
        return self.msg_id or NILVALUE


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the configuration file. If None, will look for config.yaml
                   in the current directory and default directories.

    Returns:
        A Config object containing the loaded configuration.

    Raises:
        FileNotFoundError: If the configuration file cannot be found.
        yaml.YAMLError: If the configuration file contains invalid YAML.
    """
    # Default search paths
    search_paths = [
        Path.cwd() / "config.yaml",
        Path.cwd() / "config.yml",
        Path("/etc/ziggiz-courier-syslog-stream/config.yaml"),
        Path("/etc/ziggiz-courier-syslog-stream/config.yml"),
    ]

    # If config path is provided, try that first
    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
    else:
        # Try default paths
        for path in search_paths:
            if path.exists():
                config_file = path
                break
        else:
            # No config file found, return default configuration
            logging.warning("No configuration file found, using default configuration")
            return Config()

    # Load YAML configuration
    with open(config_file, "r") as f:
        try:
            config_data = yaml.safe_load(f)
            return Config(**(config_data or {}))
        except yaml.YAMLError as e:
            logging.error("Error parsing configuration file", extra={"error": e})
            raise
        except Exception as e:
            logging.error("Error loading configuration", extra={"error": e})
            raise


class ExtraInfoFormatter(logging.Formatter):
    """
    Formatter that appends extra (non-standard) record attributes as JSON.
    """

    standard_attrs = {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "created",
        "asctime",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "message",
    }

    def format(self, record: logging.LogRecord) -> str:
        formatted_message = super().format(record)

        extra_dict = {
            key: value
            for key, value in record.__dict__.items()
            if key not in self.standard_attrs and not key.startswith("_")
        }

        if extra_dict:
            extra_str = json.dumps(extra_dict, default=str, sort_keys=True)
            return f"{formatted_message} - Extra: {extra_str}"
        return formatted_message


def configure_logging(config: "Config") -> None:
    """
    Configure logging based on the provided configuration.

    Log output goes to stderr; stdout carries the encoded syslog lines.

    Args:
        config: The loaded configuration object.
    """
    # Reset logging configuration
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    # Configure root logger
    level = getattr(logging, config.log_level, logging.INFO)
    formatter = ExtraInfoFormatter(config.log_format, datefmt=config.log_date_format)

    # Add console handler
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    logging.root.setLevel(level)
    logging.root.addHandler(console_handler)

    # Configure additional loggers from config
    for logger_config in config.loggers:
        logger = logging.getLogger(logger_config.name)
        logger.setLevel(getattr(logging, logger_config.level, logging.INFO))
        logger.propagate = logger_config.propagate
