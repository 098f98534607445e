"""Exception hierarchy for the Linear MCP server.

Validation failures are not wrapped here: they surface as ``pydantic.ValidationError``,
which already lists every offending field.
"""
from typing import Any, Dict, List, Optional


class LinearMCPError(Exception):
    """Base exception for all linear-mcp errors."""


class ConfigError(LinearMCPError):
    """Configuration is missing or malformed."""


class LinearAPIError(LinearMCPError):
    """The Linear API answered with GraphQL errors."""

    def __init__(
        self,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.errors = errors or []
        self.status_code = status_code


class NotFoundError(LinearAPIError):
    """No entity exists for the requested identifier."""
