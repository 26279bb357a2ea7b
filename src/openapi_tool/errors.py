"""Exception types raised by openapi-tool.

The CLI converts every ``OpenApiToolError`` into a user-facing message
and a non-zero exit code.
"""

from typing import Any

from openapi_tool.parser.base import Problem


class OpenApiToolError(Exception):
    """Base exception for all openapi-tool errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class ConfigError(OpenApiToolError):
    """Raised when the configuration file cannot be loaded."""


class BundlingProblemsError(OpenApiToolError):
    """Raised when any file in the batch reported bundling problems."""

    def __init__(self, problems: list[Problem]):
        super().__init__(
            "Problems when bundling, not trying to merge",
            {"problems": len(problems)},
        )
        self.problems = problems


class MergeConflictError(OpenApiToolError):
    """Raised when two documents define the same entry differently."""

    def __init__(self, pointer: str):
        super().__init__(f"Conflicting definitions for {pointer}", {"pointer": pointer})
        self.pointer = pointer


class NoDocumentsError(OpenApiToolError):
    """Raised when no OpenAPI documents were found among the input files."""
