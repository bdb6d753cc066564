"""
Standardized exit codes for dbregistry CLI commands.

Every command exits through :class:`CliExit` so scripts can rely on the
same codes: 0 on success, 1 when an operation was rejected or failed, 2
when the config file itself is unusable.
"""

from typing import Optional

import typer

# Exit code constants
EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2


class CliExit(typer.Exit):
    """
    CLI exit exception with a consistent code and an optional message.

    Usage:
        raise CliExit.success()
        raise CliExit.error("A remote list with the name 'x' already exists")
        raise CliExit.config_error("Database config is invalid")
    """

    def __init__(self, code: int, message: Optional[str] = None):
        """
        Args:
            code: Exit code (EXIT_SUCCESS, EXIT_ERROR, EXIT_CONFIG_ERROR)
            message: Optional message printed before exiting; errors go to stderr
        """
        self.message = message
        super().__init__(code)
        if message:
            typer.echo(message, err=code != EXIT_SUCCESS)

    @classmethod
    def success(cls, message: Optional[str] = None) -> "CliExit":
        return cls(EXIT_SUCCESS, message)

    @classmethod
    def error(cls, message: Optional[str] = None) -> "CliExit":
        return cls(EXIT_ERROR, message)

    @classmethod
    def config_error(cls, message: Optional[str] = None) -> "CliExit":
        return cls(EXIT_CONFIG_ERROR, message)
