"""Configuration module for the InkFlow data layer."""

import logging
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator

from inkflow import __version__
from inkflow.exceptions import ConfigurationError

# Load environment variables from the project root .env file.
# Anchored to __file__ so it works regardless of the process CWD.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# User-level config: lives next to the data directory
_USER_ENV = Path.home() / ".inkflow" / ".env"
load_dotenv(_USER_ENV)


logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path.home() / ".inkflow" / "data"


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer, got {value!r}", config_key=name
        ) from None


def _optional_float_env(name: str) -> Optional[float]:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be a number of seconds, got {value!r}", config_key=name
        ) from None


class InkflowConfig(BaseModel):
    """Configuration for the InkFlow data layer."""

    # Per-user application data directory
    data_dir: Path = Field(
        default_factory=lambda: Path(
            os.getenv("INKFLOW_DATA_DIR", str(DEFAULT_DATA_DIR))
        ).expanduser()
    )
    # Record store files (relative paths resolve against data_dir)
    notes_file: Path = Field(
        default_factory=lambda: Path(os.getenv("INKFLOW_NOTES_FILE", "notes.json"))
    )
    notebooks_file: Path = Field(
        default_factory=lambda: Path(
            os.getenv("INKFLOW_NOTEBOOKS_FILE", "notebooks.json")
        )
    )
    # Directory holding exported markdown, tracked by an external git repo
    sync_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("INKFLOW_SYNC_DIR", "sync"))
    )
    # Git configuration
    git_executable: str = Field(
        default_factory=lambda: os.getenv("INKFLOW_GIT_EXECUTABLE", "git")
    )
    # Seconds before a git subprocess is abandoned. None waits indefinitely.
    git_timeout: Optional[float] = Field(
        default_factory=lambda: _optional_float_env("INKFLOW_GIT_TIMEOUT")
    )
    max_filename_length: int = Field(
        default_factory=lambda: _int_env("INKFLOW_MAX_FILENAME_LENGTH", 100)
    )
    # Server configuration
    server_name: str = Field(default=os.getenv("INKFLOW_SERVER_NAME", "inkflow"))
    server_version: str = Field(default=__version__)

    @model_validator(mode="after")
    def _validate_limits(self) -> "InkflowConfig":
        """Reject settings the exporter and git runner cannot honour."""
        if self.max_filename_length < 1:
            raise ValueError("max_filename_length must be >= 1")
        if self.git_timeout is not None and self.git_timeout <= 0:
            raise ValueError("git_timeout must be positive when set")
        return self

    def get_absolute_path(self, path: Path) -> Path:
        """Convert a relative path to an absolute path based on data_dir."""
        if path.is_absolute():
            return path
        return self.data_dir / path

    def ensure_data_dir(self) -> Path:
        """Create the data directory if it does not exist yet."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        return self.data_dir

    def get_notes_path(self) -> Path:
        return self.get_absolute_path(self.notes_file)

    def get_notebooks_path(self) -> Path:
        return self.get_absolute_path(self.notebooks_file)

    def get_sync_path(self) -> Path:
        """Get the absolute path of the markdown sync directory."""
        return self.get_absolute_path(self.sync_dir).resolve()


# Built on first access by get_config()
_config: Optional[InkflowConfig] = None


def get_config() -> InkflowConfig:
    """Return the shared configuration, building it from the environment.

    Raises:
        ConfigurationError: If an INKFLOW_* setting is malformed or out of range.
    """
    global _config
    if _config is None:
        try:
            _config = InkflowConfig()
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e
    return _config


def reset_config() -> None:
    """Drop the shared configuration so the next access re-reads the environment."""
    global _config
    _config = None
