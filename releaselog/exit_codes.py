"""
Exit codes for releaselog commands.

Unix/POSIX conventions: 0 success, 1 general failure, 2 usage error,
64 and up for application errors, 130 for Ctrl+C.
"""
import sys
from typing import Optional

SUCCESS = 0
GENERAL_ERROR = 1
USAGE_ERROR = 2

REPOSITORY_UNAVAILABLE = 64  # No git repository at the requested location
GIT_ERROR = 65               # A git command failed or timed out
CONFIG_ERROR = 66            # Bad config file, --since value or pattern
PERMISSION_ERROR = 67        # Output file or directory not writable
INTERRUPTED = 130            # Ctrl+C (SIGINT)

# Checked in order; the first matching class wins
EXCEPTION_EXIT_CODES = (
    (PermissionError, PERMISSION_ERROR),
    (KeyboardInterrupt, INTERRUPTED),
)


def get_exit_code_for_exception(exc: BaseException) -> int:
    """Exit code for an exception that reached a command handler."""
    if isinstance(exc, CommandError):
        return exc.exit_code
    for exc_type, code in EXCEPTION_EXIT_CODES:
        if isinstance(exc, exc_type):
            return code
    return GENERAL_ERROR


def exit_with_code(code: int, message: Optional[str] = None):
    """
    Exit with a specific code and optional message.

    Args:
        code: Exit code
        message: Optional message to print to stderr
    """
    if message:
        print(message, file=sys.stderr)
    sys.exit(code)


class CommandError(Exception):
    """
    Exception that commands can raise to indicate specific exit codes.
    """
    def __init__(self, message: str, exit_code: int = GENERAL_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


class RepositoryUnavailableError(CommandError):
    """Raised when no git repository can be found at the given path."""
    def __init__(self, path: str):
        super().__init__(f"No git repository found at {path}", REPOSITORY_UNAVAILABLE)
        self.path = path


class GitCommandError(CommandError):
    """Raised when a git command fails, times out, or git is missing."""
    def __init__(self, message: str, command: Optional[str] = None, stderr: str = ""):
        super().__init__(message, GIT_ERROR)
        self.command = command
        self.stderr = stderr


class ConfigError(CommandError):
    """Raised when there's a configuration error."""
    def __init__(self, message: str):
        super().__init__(message, CONFIG_ERROR)


class WalkDisposedError(RuntimeError):
    """Raised when a commit walk is queried after it has been disposed."""
