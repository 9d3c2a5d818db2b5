# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Main entry point for the syslog stream encoder

# Standard library imports
import argparse
import logging
import sys

from typing import IO, Any, Dict, List, Optional

# Local/package imports
from ziggiz_courier_syslog_stream.config import Config, configure_logging, load_config
from ziggiz_courier_syslog_stream.stream import SyslogStream
from ziggiz_courier_syslog_stream.telemetry import configure_tracing


def setup_logging(log_level: str = "INFO", config: Optional[Config] = None) -> None:
    """
    Configure logging with appropriate formatters and handlers.

    Log records always go to stderr so they never mix with the syslog lines.

    Args:
        log_level: The logging level to set (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        config: Optional configuration object to use for logging setup
    """
    if config:
        # Use the configuration-based logging setup
        configure_logging(config)
    else:
        level = getattr(logging, log_level.upper(), logging.INFO)

        # Create a formatter with timestamp, level, and logger name
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        # Configure the root logger
        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Add console handler
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # Set specific log levels for third-party libraries
    logging.getLogger("opentelemetry").setLevel(logging.WARNING)


def apply_overrides(config: Config, overrides: Dict[str, Any]) -> Config:
    """
    Return a new configuration with command line overrides applied.

    The merged values are validated again, so an invalid override fails the
    same way an invalid configuration file does.
    """
    if not overrides:
        return config
    data = config.model_dump(exclude_unset=True)
    data.update(overrides)
    return Config(**data)


def collect_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Map parsed command line arguments to configuration fields."""
    overrides: Dict[str, Any] = {}
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.decode_json:
        overrides["decode_json"] = True
    if args.decode_buffers:
        overrides["decode_buffers"] = True
    if args.pen is not None:
        overrides["private_enterprise_number"] = args.pen
    if args.facility:
        overrides["facility"] = args.facility
    if args.app_name:
        overrides["app_name"] = args.app_name
    if args.hostname:
        overrides["hostname"] = args.hostname
    if args.msg_id:
        overrides["msg_id"] = args.msg_id
    if args.default_severity:
        overrides["default_severity"] = args.default_severity
    if args.format:
        overrides["syslog_format"] = args.format
    if args.no_structured_data:
        overrides["use_structured_data"] = False
    return overrides


def run_stream(
    config: Config, source: Optional[IO] = None, sink: Optional[IO] = None
) -> int:
    """
    Encode records from a source until it is exhausted.

    Args:
        config: Encoder configuration
        source: Input, one record per line (default: stdin, binary when
            decode_buffers is set)
        sink: Output for syslog lines (default: stdout)

    Returns:
        The number of lines written
    """
    logger = logging.getLogger("ziggiz_courier_syslog_stream.main")

    if config.enable_tracing:
        configure_tracing()

    if source is None:
        source = sys.stdin.buffer if config.decode_buffers else sys.stdin
    if sink is None:
        sink = sys.stdout

    stream = SyslogStream(config)
    try:
        written = stream.pipe(source, sink)
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
        written = stream.records_encoded
    logger.info("Stream finished", extra={"records": written})
    return written


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Ziggiz Courier Syslog Stream: encode log records read from "
        "stdin as syslog lines on stdout"
    )
    parser.add_argument(
        "--config",
        type=str,
        help="Path to configuration file",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (overrides config file)",
    )
    parser.add_argument(
        "--decode-json",
        action="store_true",
        help="Parse each input line as JSON (overrides config file)",
    )
    parser.add_argument(
        "--decode-buffers",
        action="store_true",
        help="Read stdin as bytes and decode each line as UTF-8 (overrides config file)",
    )
    parser.add_argument(
        "--pen",
        type=str,
        help="Private enterprise number for custom structured data (overrides config file)",
    )
    parser.add_argument(
        "--facility",
        type=str,
        help="Default syslog facility name (overrides config file)",
    )
    parser.add_argument(
        "--app-name",
        type=str,
        help="Default APP-NAME header value (overrides config file)",
    )
    parser.add_argument(
        "--hostname",
        type=str,
        help="Default HOSTNAME header value (overrides config file)",
    )
    parser.add_argument(
        "--msg-id",
        type=str,
        help="Default MSGID header value (overrides config file)",
    )
    parser.add_argument(
        "--default-severity",
        type=str,
        help="Severity for records without one (overrides config file)",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["rfc5424", "rfc3164", "bsd"],
        help="Syslog line format (overrides config file)",
    )
    parser.add_argument(
        "--no-structured-data",
        action="store_true",
        help="Append structured data candidates to the message as JSON instead",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the syslog stream encoder.
    Parses command-line arguments, sets up logging, and encodes stdin to stdout.
    """
    args = build_parser().parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config if args.config else None)
        config = apply_overrides(config, collect_overrides(args))

        # Setup logging based on configuration
        setup_logging(config=config)
        logger = logging.getLogger("ziggiz_courier_syslog_stream.main")

        # Log configuration source
        if args.config:
            logger.info(f"Loaded configuration from {args.config}")
        else:
            logger.info("Using default or automatically detected configuration")

        logger.info(
            "Starting Ziggiz Courier Syslog Stream",
            extra={"format": config.syslog_format},
        )
        run_stream(config)
    except KeyboardInterrupt:
        logger = logging.getLogger("ziggiz_courier_syslog_stream.main")
        logger.info("Stream shutdown requested by user")
    except Exception as e:
        # Setup basic logging if we couldn't load the configuration
        if not logging.root.handlers:
            setup_logging("ERROR")
        logger = logging.getLogger("ziggiz_courier_syslog_stream.main")
        logger.exception(f"Unexpected error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
