"""MCP server exposing the InkFlow operations as tools."""

import logging
import uuid
from typing import Optional

from mcp.server.fastmcp import FastMCP

from inkflow.config import InkflowConfig, get_config
from inkflow.exceptions import InkflowError
from inkflow.models.schema import notes_to_json
from inkflow.observability import metrics
from inkflow.services.inkflow_service import InkflowService

logger = logging.getLogger(__name__)


class InkflowMcpServer:
    """MCP server for the InkFlow data layer."""

    def __init__(
        self,
        cfg: Optional[InkflowConfig] = None,
        service: Optional[InkflowService] = None,
    ):
        self.config = cfg or get_config()
        self.mcp = FastMCP(self.config.server_name)
        self.service = service or InkflowService(self.config)
        self._register_tools()
        logger.info("InkFlow MCP server initialized")

    def format_error_response(self, error: Exception) -> str:
        """Format an error response in a consistent way.

        Domain errors carry text meant for the caller (git's stderr,
        "Notes file not found", ...) and are returned as-is. Anything
        else is logged with a reference id and reported generically.
        """
        error_id = str(uuid.uuid4())[:8]

        if isinstance(error, InkflowError):
            logger.error(
                f"[{error.code.name}] [{error_id}]: {error.message}",
                extra={"error_details": error.to_dict()},
            )
            return f"Error: {error.message}"
        elif isinstance(error, (IOError, OSError)):
            logger.error(f"File system error [{error_id}]: {str(error)}", exc_info=True)
            return f"Error: A file system error occurred (ref: {error_id})"
        else:
            logger.error(f"Unexpected error [{error_id}]: {str(error)}", exc_info=True)
            return f"Error: An unexpected error occurred (ref: {error_id})"

    def _register_tools(self) -> None:
        """Register MCP tools."""

        @self.mcp.tool(name="load_notes")
        def load_notes() -> str:
            """Return the stored notes collection as JSON."""
            try:
                return self.service.load_notes()
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="save_notes")
        def save_notes(notes_json: str) -> str:
            """Store the notes collection.
            Args:
                notes_json: JSON array of notes, stored verbatim
            """
            try:
                self.service.save_notes(notes_json)
                return "Notes saved"
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="load_notebooks")
        def load_notebooks() -> str:
            """Return the stored notebooks collection as JSON."""
            try:
                return self.service.load_notebooks()
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="save_notebooks")
        def save_notebooks(notebooks_json: str) -> str:
            """Store the notebooks collection.
            Args:
                notebooks_json: JSON array of notebooks, stored verbatim
            """
            try:
                self.service.save_notebooks(notebooks_json)
                return "Notebooks saved"
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="search_notes")
        def search_notes(query: str = "") -> str:
            """Search stored notes by title, content or tag.
            Args:
                query: Case-insensitive text to look for; empty returns all notes
            """
            try:
                return notes_to_json(self.service.search_notes(query))
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="export_notes_as_markdown")
        def export_notes_as_markdown(notes_json: str) -> str:
            """Regenerate the markdown sync directory from a notes collection.
            Args:
                notes_json: JSON array of notes to export
            Returns the absolute path of the sync directory.
            """
            try:
                return self.service.export_notes_as_markdown(notes_json)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="git_status")
        def git_status(path: str) -> str:
            """Show porcelain git status for a working tree.
            Args:
                path: Working tree to run git in
            """
            try:
                return self.service.git_status(path)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="git_add_all")
        def git_add_all(path: str) -> str:
            """Stage all changes in a working tree."""
            try:
                return self.service.git_add_all(path)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="git_commit")
        def git_commit(path: str, message: str) -> str:
            """Commit staged changes.
            Args:
                path: Working tree to run git in
                message: Commit message
            """
            try:
                return self.service.git_commit(path, message)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="git_push")
        def git_push(path: str) -> str:
            """Push the current branch to its upstream."""
            try:
                return self.service.git_push(path)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="git_pull")
        def git_pull(path: str) -> str:
            """Pull from the current branch's upstream."""
            try:
                return self.service.git_pull(path)
            except Exception as e:
                return self.format_error_response(e)

        @self.mcp.tool(name="get_metrics")
        def get_metrics(include_details: bool = False) -> str:
            """Report operation counts, timings and errors since start.
            Args:
                include_details: Add a per-operation breakdown (default: False)
            """
            try:
                summary = metrics.get_summary()
                output = "## InkFlow Data Layer Metrics\n\n"
                output += f"**Uptime:** {summary['uptime_seconds']:.1f} seconds\n"
                output += f"**Operations:** {summary['total_operations']}\n"
                output += f"**Errors:** {summary['total_errors']}\n"

                if include_details and summary["operations_tracked"]:
                    output += "\n### Operations\n\n"
                    for name, m in sorted(metrics.get_metrics().items()):
                        output += f"**{name}**\n"
                        output += (
                            f"  - Count: {m['count']} ({m['success_count']} ok, "
                            f"{m['error_count']} failed)\n"
                        )
                        output += (
                            f"  - Duration: avg {m['avg_duration_ms']:.2f}ms, "
                            f"max {m['max_duration_ms']:.2f}ms\n"
                        )
                        if m["last_error"]:
                            output += (
                                f"  - Last Error: {m['last_error']} "
                                f"at {m['last_error_time']}\n"
                            )
                return output
            except Exception as e:
                return self.format_error_response(e)

    def run(self) -> None:
        """Run the MCP server."""
        self.mcp.run()
