"""Structured error handling utilities."""

import json
import logging
from typing import Any, Dict, List, Optional

from mcp.types import CallToolResult, TextContent


# Configure module logger
logger = logging.getLogger(__name__)


class MCPError(Exception):
    """Base exception for MCP server errors."""

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        log: bool = True
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)
        if log:
            logger.error(f"MCPError ({code}): {message}", extra={"details": self.details})

    def to_dict(self) -> dict:
        """Convert error to standardized dictionary format."""
        return error_response(self.code, self.message, self.details)


class GitHubApiError(MCPError):
    """Exception for non-2xx responses from the GitHub API."""
    def __init__(self, status_code: int, status_text: str = "", message: Optional[str] = None):
        self.status_code = status_code
        self.status_text = status_text
        if message is None:
            message = f"GitHub API error: {status_code} {status_text}".rstrip()
        details = {"status_code": status_code, "status_text": status_text}
        super().__init__("GITHUB_API_ERROR", message, details)


class ConfigurationError(MCPError):
    """Exception for missing or invalid configuration values."""
    def __init__(self, message: str, variables: Optional[List[str]] = None):
        self.variables = list(variables or [])
        super().__init__("CONFIGURATION_ERROR", message, {"variables": self.variables}, log=False)


def success_response(data: Any) -> dict:
    """Create a standardized success response."""
    return {
        "ok": True,
        "data": data
    }


def error_response(code: str, message: str, details: Optional[Dict[str, Any]] = None) -> dict:
    """Create a standardized error response."""
    return {
        "ok": False,
        "error": {
            "code": code,
            "message": message,
            "details": details or {}
        }
    }


def format_json_response(data: Any, indent: int = 2) -> str:
    """
    Format response data as JSON string.

    Args:
        data: Any JSON-serializable value
        indent: JSON indentation level

    Returns:
        JSON-formatted string
    """
    return json.dumps(data, indent=indent)


def text_result(text: str) -> CallToolResult:
    """Wrap text in a successful tool result."""
    return CallToolResult(content=[TextContent(type="text", text=text)])


def error_result(message: str) -> CallToolResult:
    """Wrap an error message in an error-flagged tool result."""
    return CallToolResult(
        content=[TextContent(type="text", text=f"Error: {message}")],
        isError=True
    )


def to_tool_result(result: dict) -> CallToolResult:
    """
    Convert a standardized response into an MCP tool result.

    Successful string payloads (markdown, pre-rendered JSON) are passed
    through; any other payload is serialized as indented JSON.

    Args:
        result: Response dict from success_response or error_response

    Returns:
        CallToolResult with a single text content block
    """
    if result.get("ok"):
        data = result.get("data")
        if isinstance(data, str):
            return text_result(data)
        return text_result(format_json_response(data))

    error = result.get("error", {})
    return error_result(error.get("message", "Unknown error"))
