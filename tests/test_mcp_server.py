"""Tests for the MCP server implementation."""
from unittest.mock import MagicMock, patch

import pytest

from inkflow.exceptions import ErrorCode, GitCommandError, RecordNotFoundError, StorageError
from inkflow.models.schema import Note
from inkflow.observability import metrics
from inkflow.server.mcp_server import InkflowMcpServer
from tests.fakes import make_note


class TestMcpServer:
    """Tests for the InkflowMcpServer class."""

    def setup_method(self):
        """Capture tool registrations and mock the service."""
        self.registered_tools = {}
        self.mock_mcp = MagicMock()

        def mock_tool_decorator(*args, **kwargs):
            def tool_wrapper(func):
                self.registered_tools[kwargs.get("name")] = func
                return func
            return tool_wrapper
        self.mock_mcp.tool = mock_tool_decorator

        self.mock_service = MagicMock()
        self.mcp_patcher = patch("inkflow.server.mcp_server.FastMCP", return_value=self.mock_mcp)
        self.mcp_patcher.start()
        self.server = InkflowMcpServer(service=self.mock_service)

    def teardown_method(self):
        self.mcp_patcher.stop()

    def test_all_operations_registered(self):
        assert set(self.registered_tools) == {
            "load_notes",
            "save_notes",
            "load_notebooks",
            "save_notebooks",
            "search_notes",
            "export_notes_as_markdown",
            "git_status",
            "git_add_all",
            "git_commit",
            "git_push",
            "git_pull",
            "get_metrics",
        }

    def test_load_notes_returns_payload(self):
        self.mock_service.load_notes.return_value = "[]"
        assert self.registered_tools["load_notes"]() == "[]"

    def test_load_notes_not_found(self):
        self.mock_service.load_notes.side_effect = RecordNotFoundError("notes")
        assert self.registered_tools["load_notes"]() == "Error: Notes file not found"

    def test_save_notes(self):
        result = self.registered_tools["save_notes"](notes_json="[]")
        assert result == "Notes saved"
        self.mock_service.save_notes.assert_called_once_with("[]")

    def test_save_notebooks(self):
        assert self.registered_tools["save_notebooks"](notebooks_json="[]") == "Notebooks saved"
        self.mock_service.save_notebooks.assert_called_once_with("[]")

    def test_export_returns_path(self):
        self.mock_service.export_notes_as_markdown.return_value = "/home/u/.inkflow/data/sync"
        result = self.registered_tools["export_notes_as_markdown"](notes_json="[]")
        assert result == "/home/u/.inkflow/data/sync"

    def test_search_returns_json(self):
        self.mock_service.search_notes.return_value = [Note.model_validate(make_note())]
        result = self.registered_tools["search_notes"](query="hello")
        assert '"notebookId":"nb1"' in result
        self.mock_service.search_notes.assert_called_once_with("hello")

    def test_git_commit(self):
        self.mock_service.git_commit.return_value = "Nothing to commit"
        result = self.registered_tools["git_commit"](path="/repo", message="Sync")
        assert result == "Nothing to commit"
        self.mock_service.git_commit.assert_called_once_with("/repo", "Sync")

    def test_git_error_returns_stderr(self):
        self.mock_service.git_push.side_effect = GitCommandError(
            "error: failed to push some refs", returncode=1
        )
        result = self.registered_tools["git_push"](path="/repo")
        assert result == "Error: error: failed to push some refs"

    @pytest.mark.parametrize("tool", ["git_status", "git_add_all", "git_pull"])
    def test_git_tools_pass_path(self, tool):
        getattr(self.mock_service, tool).return_value = "ok"
        assert self.registered_tools[tool](path="/repo") == "ok"
        getattr(self.mock_service, tool).assert_called_once_with("/repo")

    def test_unexpected_error_is_generic(self):
        self.mock_service.load_notebooks.side_effect = RuntimeError("boom")
        result = self.registered_tools["load_notebooks"]()
        assert result.startswith("Error: An unexpected error occurred (ref: ")
        assert "boom" not in result

    def test_os_error_hides_details(self):
        self.mock_service.save_notes.side_effect = PermissionError("/secret/path")
        result = self.registered_tools["save_notes"](notes_json="[]")
        assert "file system error" in result
        assert "/secret/path" not in result

    def test_export_storage_error_returns_underlying_text(self):
        self.mock_service.export_notes_as_markdown.side_effect = StorageError(
            "[Errno 13] Permission denied: '/data/sync'",
            operation="clean_sync_dir",
            code=ErrorCode.EXPORT_WRITE_FAILED,
        )
        result = self.registered_tools["export_notes_as_markdown"](notes_json="[]")
        assert result == "Error: [Errno 13] Permission denied: '/data/sync'"

    def test_get_metrics_summary(self):
        metrics.record_operation("git_push", 12.0)
        metrics.record_operation("git_push", 30.0, "rejected")

        result = self.registered_tools["get_metrics"]()

        assert "**Operations:** 2" in result
        assert "**Errors:** 1" in result
        assert "git_push" not in result

    def test_get_metrics_details(self):
        metrics.record_operation("export_notes_as_markdown", 5.0)
        metrics.record_operation("git_commit", 8.0, "nothing added")

        result = self.registered_tools["get_metrics"](include_details=True)

        assert "**export_notes_as_markdown**" in result
        assert "Count: 1 (0 ok, 1 failed)" in result
        assert "Last Error: nothing added" in result

    def test_domain_error_logged_with_structured_details(self, caplog):
        self.mock_service.git_pull.side_effect = GitCommandError(
            "fatal: not a git repository", command=["pull"], returncode=128
        )
        with caplog.at_level("ERROR", logger="inkflow.server.mcp_server"):
            self.registered_tools["git_pull"](path="/tmp/nowhere")

        record = caplog.records[-1]
        assert record.error_details == {
            "error": "GitCommandError",
            "code": ErrorCode.GIT_COMMAND_FAILED.value,
            "code_name": "GIT_COMMAND_FAILED",
            "message": "fatal: not a git repository",
            "details": {"command": "pull", "returncode": 128},
        }
