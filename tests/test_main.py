# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Tests for the main module

# Standard library imports
import io
import logging

# Third-party imports
import pytest

from pydantic import ValidationError

# Local/package imports
from ziggiz_courier_syslog_stream.config import Config
from ziggiz_courier_syslog_stream.main import (
    apply_overrides,
    build_parser,
    collect_overrides,
    main,
    run_stream,
    setup_logging,
)


class TestMainModule:
    """Tests for the main entry point module."""

    @pytest.mark.unit
    def test_setup_logging(self):
        """Test that logging is set up correctly."""
        setup_logging("DEBUG")
        root_logger = logging.getLogger()

        assert root_logger.level == logging.DEBUG
        assert len(root_logger.handlers) >= 1

        # Check that the opentelemetry logger is quieted
        assert logging.getLogger("opentelemetry").level == logging.WARNING

        # Test with INFO level (reset handlers first)
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        setup_logging("INFO")
        assert root_logger.level == logging.INFO

    @pytest.mark.unit
    def test_setup_logging_uses_stderr(self, capsys):
        setup_logging("INFO")
        logging.getLogger("test").info("to stderr")
        captured = capsys.readouterr()
        assert "to stderr" not in captured.out

    @pytest.mark.unit
    def test_setup_logging_with_config(self, mocker):
        mock_configure = mocker.patch(
            "ziggiz_courier_syslog_stream.main.configure_logging"
        )
        config = Config()
        setup_logging(config=config)
        mock_configure.assert_called_once_with(config)

    @pytest.mark.unit
    def test_collect_overrides(self):
        args = build_parser().parse_args(
            [
                "--log-level",
                "DEBUG",
                "--decode-json",
                "--pen",
                "32473",
                "--facility",
                "local5",
                "--app-name",
                "web",
                "--hostname",
                "h1",
                "--msg-id",
                "REQ",
                "--default-severity",
                "err",
                "--format",
                "bsd",
                "--no-structured-data",
            ]
        )
        assert collect_overrides(args) == {
            "log_level": "DEBUG",
            "decode_json": True,
            "private_enterprise_number": "32473",
            "facility": "local5",
            "app_name": "web",
            "hostname": "h1",
            "msg_id": "REQ",
            "default_severity": "err",
            "syslog_format": "bsd",
            "use_structured_data": False,
        }
        assert collect_overrides(build_parser().parse_args([])) == {}

    @pytest.mark.unit
    def test_apply_overrides_revalidates(self):
        config = Config(appName="from-file", PEN=1)
        merged = apply_overrides(
            config, {"syslog_format": "bsd", "private_enterprise_number": "7"}
        )
        assert merged.app_name == "from-file"
        assert merged.syslog_format == "rfc3164"
        assert merged.private_enterprise_number == 7
        assert merged.structured_data_enabled is False

        with pytest.raises(ValidationError):
            apply_overrides(config, {"facility": "nowhere"})

    @pytest.mark.unit
    def test_apply_overrides_none(self):
        config = Config()
        assert apply_overrides(config, {}) is config

    @pytest.mark.unit
    def test_run_stream(self):
        config = Config(hostname="h", app_name="a", pid=1, decode_json=True)
        sink = io.StringIO()
        written = run_stream(config, io.StringIO('{"msg":"hi"}\nplain\n'), sink)
        assert written == 2
        assert sink.getvalue().count("\n") == 2

    @pytest.mark.unit
    def test_run_stream_enables_tracing(self, mocker):
        mock_tracing = mocker.patch(
            "ziggiz_courier_syslog_stream.main.configure_tracing"
        )
        run_stream(Config(enable_tracing=True), io.StringIO(""), io.StringIO())
        mock_tracing.assert_called_once_with()

    @pytest.mark.unit
    def test_run_stream_interrupted(self, mocker, caplog):
        caplog.set_level(logging.INFO)
        mocker.patch(
            "ziggiz_courier_syslog_stream.stream.SyslogStream.pipe",
            side_effect=KeyboardInterrupt,
        )
        assert run_stream(Config(), io.StringIO("x\n"), io.StringIO()) == 0
        assert "Received keyboard interrupt" in caplog.text

    @pytest.mark.unit
    def test_main_reads_stdin(self, mocker, capsys):
        mocker.patch(
            "ziggiz_courier_syslog_stream.main.load_config", return_value=Config()
        )
        mocker.patch("sys.stdin", io.StringIO("hello\n"))

        main(["--hostname", "h1", "--app-name", "web", "--msg-id", "REQ"])

        out = capsys.readouterr().out
        assert out.startswith("<133>1 ")
        assert out.endswith(" h1 web %s REQ - hello\n" % out.split(" ")[4])

    @pytest.mark.unit
    def test_main_with_config_file(self, mocker, tmp_path, capsys):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("format: rfc3164\nhostname: filehost\napp_name: svc\n")
        mocker.patch("sys.stdin", io.StringIO("hello\n"))

        main(["--config", str(config_file)])

        out = capsys.readouterr().out
        assert " filehost svc[" in out
        assert out.endswith("]: hello\n")

    @pytest.mark.unit
    def test_main_config_error_exits(self, mocker):
        mocker.patch(
            "ziggiz_courier_syslog_stream.main.load_config",
            side_effect=FileNotFoundError("missing"),
        )
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", "missing.yaml"])
        assert exc_info.value.code == 1

    @pytest.mark.unit
    def test_main_invalid_override_exits(self, mocker):
        mocker.patch(
            "ziggiz_courier_syslog_stream.main.load_config", return_value=Config()
        )
        with pytest.raises(SystemExit) as exc_info:
            main(["--facility", "nowhere"])
        assert exc_info.value.code == 1
