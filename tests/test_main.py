"""Tests for the command line entry point."""
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from inkflow.config import get_config, reset_config
from inkflow.main import main, parse_args


class TestMain:
    """Tests for argument handling in main()."""

    @pytest.fixture(autouse=True)
    def fresh_config(self, monkeypatch):
        monkeypatch.delenv("INKFLOW_MAX_FILENAME_LENGTH", raising=False)
        monkeypatch.delenv("INKFLOW_GIT_TIMEOUT", raising=False)
        reset_config()
        yield
        reset_config()

    def test_parse_args_defaults(self, monkeypatch):
        monkeypatch.delenv("INKFLOW_DATA_DIR", raising=False)
        monkeypatch.delenv("INKFLOW_LOG_LEVEL", raising=False)
        args = parse_args([])
        assert args.data_dir is None
        assert args.log_level == "INFO"
        assert args.init is False

    def test_init_seeds_data_and_exits(self, tmp_path):
        data_dir = tmp_path / "data"

        with patch("inkflow.main.configure_logging", return_value=tmp_path), \
                patch("inkflow.main.InkflowMcpServer") as server_cls:
            main(["--data-dir", str(data_dir), "--init"])

        assert (data_dir / "notes.json").exists()
        assert (data_dir / "notebooks.json").exists()
        server_cls.assert_not_called()

    def test_runs_server(self, tmp_path):
        server = MagicMock()

        with patch("inkflow.main.configure_logging", return_value=tmp_path), \
                patch("inkflow.main.InkflowMcpServer", return_value=server):
            main(["--data-dir", str(tmp_path)])

        assert get_config().data_dir == Path(tmp_path)
        server.run.assert_called_once()

    def test_malformed_environment_exits(self, tmp_path, monkeypatch):
        monkeypatch.setenv("INKFLOW_MAX_FILENAME_LENGTH", "abc")

        with patch("inkflow.main.configure_logging", return_value=tmp_path), \
                patch("inkflow.main.InkflowMcpServer") as server_cls:
            with pytest.raises(SystemExit) as exc_info:
                main(["--data-dir", str(tmp_path)])

        assert exc_info.value.code == 1
        server_cls.assert_not_called()
