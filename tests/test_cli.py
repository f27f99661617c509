"""
Tests for command line argument handling

Tests cover:
- Argument parsing
- Overrides on top of the configuration file
- Exit codes
"""
import json
from unittest.mock import patch

import pytest

from catchview.cli import apply_overrides, main, setup_argument_parser
from catchview.utils.config import ConfigManager


class TestArgumentParsing:
    """Tests for the argument parser"""

    def test_no_arguments(self):
        args = setup_argument_parser().parse_args([])
        assert args.url is None
        assert args.interval is None
        assert args.save is False

    def test_all_options(self, temp_config_path):
        args = setup_argument_parser().parse_args([
            "--url", "http://localhost:1080",
            "--interval", "2.5",
            "--timeout", "5",
            "--log-level", "debug",
            "--config", str(temp_config_path),
            "--save",
        ])
        assert args.url == "http://localhost:1080"
        assert args.interval == 2.5
        assert args.timeout == 5.0
        assert args.log_level == "DEBUG"
        assert args.config == temp_config_path
        assert args.save is True

    @pytest.mark.parametrize("value", ["0", "-3", "soon"])
    def test_bad_interval_rejected(self, value):
        with pytest.raises(SystemExit):
            setup_argument_parser().parse_args(["--interval", value])


class TestOverrides:
    """Tests for applying options to the loaded configuration"""

    def test_overrides_not_saved_by_default(self, temp_config_path):
        manager = ConfigManager(temp_config_path)
        args = setup_argument_parser().parse_args(["--url", "http://other:8025", "--interval", "1"])
        apply_overrides(manager, args)

        assert manager.config.server.base_url == "http://other:8025"
        assert manager.config.viewer.poll_interval == 1.0
        saved = json.loads(temp_config_path.read_text())
        assert saved["server"]["base_url"] == "http://localhost:8025"

    def test_save_persists_overrides(self, temp_config_path):
        manager = ConfigManager(temp_config_path)
        args = setup_argument_parser().parse_args(["--timeout", "7", "--save"])
        apply_overrides(manager, args)

        saved = json.loads(temp_config_path.read_text())
        assert saved["server"]["timeout"] == 7.0


class TestMain:
    """Tests for the entry point"""

    def test_runs_app_with_overrides(self, temp_config_path):
        with patch("catchview.tui.app.CatchViewApp.run") as run:
            code = main(["--config", str(temp_config_path), "--url", "http://mail.test:1025"])

        assert code == 0
        run.assert_called_once()

    def test_passes_config_to_app(self, temp_config_path):
        with patch("catchview.tui.app.CatchViewApp") as app_cls:
            main(["--config", str(temp_config_path), "--interval", "4"])

        config = app_cls.call_args.args[0]
        assert config.viewer.poll_interval == 4.0
        app_cls.return_value.run.assert_called_once()

    def test_invalid_url_exits_with_error(self, temp_config_path):
        with patch("catchview.tui.app.CatchViewApp.run") as run:
            code = main(["--config", str(temp_config_path), "--url", "localhost"])

        assert code == 1
        run.assert_not_called()

    def test_broken_config_file(self, temp_config_path):
        temp_config_path.write_text("{broken")
        with patch("catchview.tui.app.CatchViewApp.run") as run:
            assert main(["--config", str(temp_config_path)]) == 1
        run.assert_not_called()

    def test_keyboard_interrupt(self, temp_config_path):
        with patch("catchview.tui.app.CatchViewApp.run", side_effect=KeyboardInterrupt):
            assert main(["--config", str(temp_config_path)]) == 130
