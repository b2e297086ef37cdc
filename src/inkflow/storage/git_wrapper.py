"""Git wrapper for syncing the exported markdown directory.

Runs git subcommands through a pluggable runner and classifies their
outcomes. The production runner spawns the git executable via
subprocess; tests substitute a fake that returns scripted results.
"""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Union

from inkflow.exceptions import GitCommandError, GitSpawnError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

NOTHING_TO_COMMIT = "nothing to commit"

ADD_ALL_MESSAGE = "All changes staged"
PUSH_MESSAGE = "Pushed successfully"
NOTHING_TO_COMMIT_MESSAGE = "Nothing to commit"


@dataclass(frozen=True)
class GitResult:
    """Captured result of one git invocation.

    Attributes:
        returncode: Process exit status
        stdout: Standard output text
        stderr: Standard error text
    """

    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class GitRunner(Protocol):
    """Capability that executes git with a working directory.

    Implementations raise ``GitSpawnError`` when git cannot be started.
    """

    def run(self, args: List[str], cwd: Path) -> GitResult:
        ...


class SubprocessGitRunner:
    """Runs the git executable as a child process.

    The child inherits the current environment unchanged and the call
    blocks until it exits, unless a timeout is configured.
    """

    def __init__(self, executable: str = "git", timeout: Optional[float] = None):
        self.executable = executable
        self.timeout = timeout

    def run(self, args: List[str], cwd: Path) -> GitResult:
        cmd = [self.executable] + args
        try:
            result = subprocess.run(
                cmd,
                cwd=str(cwd),
                check=False,
                capture_output=True,
                text=True,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as e:
            raise GitCommandError(
                f"Git command timed out after {self.timeout}s: {' '.join(args)}",
                command=cmd,
            ) from e
        except OSError as e:
            # Missing executable, missing working directory, permission denied
            raise GitSpawnError(command=cmd, original_error=e) from e

        return GitResult(
            returncode=result.returncode,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
        )


class GitOperator:
    """Status/add/commit/push/pull against a caller-supplied working tree.

    Each call spawns exactly one git process; nothing is retried. The
    path is not checked to be a repository beforehand, git reports that
    itself.
    """

    def __init__(self, runner: Optional[GitRunner] = None):
        self.runner = runner or SubprocessGitRunner()

    def _run(self, args: List[str], repo_path: PathLike) -> GitResult:
        cwd = Path(repo_path)
        logger.debug(f"Running git {' '.join(args)} in {cwd}")
        return self.runner.run(args, cwd)

    def _check(self, result: GitResult, args: List[str]) -> GitResult:
        if not result.ok:
            logger.debug(
                f"git {args[0]} exited with {result.returncode}: {result.stderr.strip()}"
            )
            raise GitCommandError(
                result.stderr, command=["git"] + args, returncode=result.returncode
            )
        return result

    def status(self, repo_path: PathLike) -> str:
        """Return the porcelain working-tree status."""
        args = ["status", "--porcelain"]
        return self._check(self._run(args, repo_path), args).stdout

    def add_all(self, repo_path: PathLike) -> str:
        """Stage every change in the working tree."""
        args = ["add", "-A"]
        self._check(self._run(args, repo_path), args)
        return ADD_ALL_MESSAGE

    def commit(self, repo_path: PathLike, message: str) -> str:
        """Commit staged changes.

        A rejection because there is nothing to commit is reported as
        success with ``"Nothing to commit"``. git prints that phrase on
        stdout, so both streams are inspected.
        """
        args = ["commit", "-m", message]
        result = self._run(args, repo_path)
        if not result.ok and (
            NOTHING_TO_COMMIT in result.stderr or NOTHING_TO_COMMIT in result.stdout
        ):
            logger.info(f"Nothing to commit in {repo_path}")
            return NOTHING_TO_COMMIT_MESSAGE
        return self._check(result, args).stdout

    def push(self, repo_path: PathLike) -> str:
        args = ["push"]
        self._check(self._run(args, repo_path), args)
        return PUSH_MESSAGE

    def pull(self, repo_path: PathLike) -> str:
        args = ["pull"]
        return self._check(self._run(args, repo_path), args).stdout
