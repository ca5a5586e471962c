import logging

import pytest


class TestMain:
    @pytest.fixture(autouse=True)
    def app_config(self, mocker):
        """
        Patch the global configuration with a fresh object.
        """
        from miseupdater.config import Configuration

        config_object = Configuration()
        mocker.patch("miseupdater.main.app_config", config_object)
        return config_object

    def test_main(self, mocker, app_config):
        """
        Test the main function of the application.
        """
        mock_from_env = mocker.patch.object(app_config, "from_env", return_value=True)
        mock_setup_logging = mocker.patch("miseupdater.main.setup_logging")
        mock_cli_app = mocker.patch("miseupdater.cli.app")

        from miseupdater.main import main

        main()

        mock_from_env.assert_called_once()
        mock_setup_logging.assert_called_once_with(
            "INFO", app_config["options"]["log_file"]
        )
        mock_cli_app.assert_called_once()

    def test_main_debug_logs_to_console(self, mocker, app_config):
        """
        Debug mode ignores the log file and logs to the console.
        """
        app_config["options"]["debug"] = True
        app_config["options"]["log_level"] = "DEBUG"

        mocker.patch.object(app_config, "from_env", return_value=True)
        mock_setup_logging = mocker.patch("miseupdater.main.setup_logging")
        mocker.patch("miseupdater.cli.app")

        from miseupdater.main import main

        main()

        mock_setup_logging.assert_called_once_with("DEBUG")

    def test_main_invalid_environment(self, mocker, app_config, capsys):
        """
        An invalid option from the environment aborts startup.
        """
        mocker.patch.object(
            app_config, "from_env", side_effect=ValueError("Invalid progress_mode")
        )
        mock_cli_app = mocker.patch("miseupdater.cli.app")

        from miseupdater.main import main

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Startup error: Invalid progress_mode" in capsys.readouterr().err
        mock_cli_app.assert_not_called()

    def test_main_logging_failure(self, mocker, app_config, capsys):
        mocker.patch.object(app_config, "from_env", return_value=True)
        mocker.patch(
            "miseupdater.main.setup_logging",
            side_effect=OSError("Permission denied"),
        )
        mock_cli_app = mocker.patch("miseupdater.cli.app")

        from miseupdater.main import main

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 1
        assert "Unable to set up logging" in capsys.readouterr().err
        mock_cli_app.assert_not_called()


class TestSetupLogging:
    def test_setup_logging_stream_handler(self, mocker):
        """
        Test setup_logging with no log_file (should use StreamHandler).
        """
        basic_config = mocker.patch("logging.basicConfig")
        get_logger = mocker.patch("logging.getLogger")

        from miseupdater.main import setup_logging

        setup_logging("INFO")

        handlers = basic_config.call_args.kwargs["handlers"]
        assert type(handlers[0]) is logging.StreamHandler
        get_logger.assert_any_call("miseupdater")
        get_logger.return_value.setLevel.assert_any_call("INFO")

    def test_setup_logging_file_handler(self, mocker, tmp_path):
        """
        The log file directory is created if it does not exist.
        """
        basic_config = mocker.patch("logging.basicConfig")
        mocker.patch("logging.getLogger")
        log_file = tmp_path / "cache" / "miseupdater.log"

        from miseupdater.main import setup_logging

        setup_logging("DEBUG", str(log_file))

        handler = basic_config.call_args.kwargs["handlers"][0]
        assert isinstance(handler, logging.FileHandler)
        assert log_file.parent.is_dir()
        handler.close()

    def test_setup_logging_invalid_log_level(self):
        from miseupdater.main import setup_logging

        with pytest.raises(ValueError):
            setup_logging("INVALID_LEVEL")
