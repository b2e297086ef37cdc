"""Custom exceptions for the InkFlow data layer.

Provides a structured exception hierarchy with error codes. Every error
still carries a plain ``message`` because callers of the operation
surface receive error text, not codes.
"""
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(Enum):
    """Error codes for machine-readable error identification."""

    # Record errors (1xxx)
    RECORD_NOT_FOUND = 1001
    RECORD_PARSE_FAILED = 1002

    # Storage errors (4xxx)
    STORAGE_READ_FAILED = 4001
    STORAGE_WRITE_FAILED = 4002
    EXPORT_WRITE_FAILED = 4003

    # Configuration errors (6xxx)
    CONFIG_INVALID = 6001

    # Git errors (8xxx)
    GIT_SPAWN_FAILED = 8001
    GIT_COMMAND_FAILED = 8002


class InkflowError(Exception):
    """Base exception for all InkFlow errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "code": self.code.value,
            "code_name": self.code.name,
            "message": self.message,
            "details": self.details
        }

    def __str__(self) -> str:
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"[{self.code.name}] {self.message} ({detail_str})"
        return f"[{self.code.name}] {self.message}"


class RecordNotFoundError(InkflowError):
    """Raised when a record file does not exist on load."""

    def __init__(self, record_kind: str, path: Optional[str] = None):
        details = {"record_kind": record_kind}
        if path:
            # Only the file name, never the full path
            details["path_hint"] = path.split("/")[-1] if "/" in path else path
        super().__init__(
            f"{record_kind.capitalize()} file not found",
            code=ErrorCode.RECORD_NOT_FOUND,
            details=details
        )
        self.record_kind = record_kind
        self.path = path


class RecordParseError(InkflowError):
    """Raised when a serialized note or notebook collection is malformed."""

    def __init__(
        self,
        message: str,
        record_kind: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if record_kind:
            details["record_kind"] = record_kind
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=ErrorCode.RECORD_PARSE_FAILED, details=details)
        self.record_kind = record_kind
        self.original_error = original_error


class StorageError(InkflowError):
    """Raised for storage/persistence errors."""

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        path: Optional[str] = None,
        code: ErrorCode = ErrorCode.STORAGE_READ_FAILED,
        original_error: Optional[Exception] = None
    ):
        details = {}
        if operation:
            details["operation"] = operation
        if path:
            details["path_hint"] = path.split("/")[-1] if "/" in path else path
        if original_error:
            details["original_error"] = str(original_error)[:200]

        super().__init__(message, code=code, details=details)
        self.operation = operation
        self.path = path
        self.original_error = original_error


class ConfigurationError(InkflowError):
    """Raised for configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        details = {}
        if config_key:
            details["config_key"] = config_key

        super().__init__(message, code=ErrorCode.CONFIG_INVALID, details=details)
        self.config_key = config_key


class GitError(InkflowError):
    """Base exception for git operations.

    Attributes:
        command: The git arguments that were run (if applicable)
        returncode: Exit code from git (if applicable)
        stderr: Error output from git (if applicable)
    """

    def __init__(
        self,
        message: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        code: ErrorCode = ErrorCode.GIT_COMMAND_FAILED,
    ):
        details: Dict[str, Any] = {}
        if command:
            details["command"] = " ".join(command)
        if returncode is not None:
            details["returncode"] = returncode

        super().__init__(message, code=code, details=details)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr


class GitSpawnError(GitError):
    """Raised when the git executable cannot be started at all."""

    def __init__(
        self,
        command: List[str],
        original_error: Optional[Exception] = None,
    ):
        reason = str(original_error) if original_error else "unknown error"
        super().__init__(
            f"Failed to run git: {reason}",
            command=command,
            code=ErrorCode.GIT_SPAWN_FAILED,
        )
        self.original_error = original_error


class GitCommandError(GitError):
    """Raised when git ran but rejected the command (non-zero exit).

    The message is git's own error output so callers can inspect it.
    """

    def __init__(
        self,
        stderr: str,
        command: Optional[List[str]] = None,
        returncode: Optional[int] = None,
    ):
        super().__init__(
            stderr or f"git exited with status {returncode}",
            command=command,
            returncode=returncode,
            stderr=stderr,
            code=ErrorCode.GIT_COMMAND_FAILED,
        )
