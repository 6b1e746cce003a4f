"""Configuration and constants for the GitHub PR analysis MCP server."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .utils.errors import ConfigurationError

# Server identity
SERVER_NAME = "github-api"
SERVER_VERSION = "1.0.0"

# GitHub API Configuration
GITHUB_API_BASE = "https://api.github.com"
GITHUB_ACCEPT = "application/vnd.github.v3+json"
GITHUB_USER_AGENT = "GitHub-API-Client"
DEFAULT_TIMEOUT = 30

# Transport
SUPPORTED_TRANSPORTS = ("stdio", "sse", "streamable-http")
DEFAULT_TRANSPORT = "streamable-http"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000

# Launcher request
LAUNCHER_TOOL_NAME = "analyze_and_comment_pr"
LAUNCHER_RPC_METHOD = "tools.call"

# Error Codes
class ErrorCode:
    """Standardized error codes for consistent error handling."""
    GITHUB_API_ERROR = "GITHUB_API_ERROR"
    HTTP_ERROR = "HTTP_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNEXPECTED_ERROR = "UNEXPECTED_ERROR"

# GitHub API Headers
def get_github_headers(token: Optional[str] = None, json_body: bool = False) -> dict:
    """Get GitHub API headers with optional authentication."""
    headers = {
        "Accept": GITHUB_ACCEPT,
        "User-Agent": GITHUB_USER_AGENT,
    }
    if json_body:
        headers["Content-Type"] = "application/json"
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


@dataclass(frozen=True)
class LauncherConfig:
    """Pull request coordinates and credentials for a single launcher run."""

    owner: str
    repo: str
    pull_number: int
    token: str

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LauncherConfig":
        """
        Build the launcher configuration from environment variables.

        Reads PR_OWNER, PR_REPO, PR_NUMBER and GITHUB_TOKEN. All four are
        required and PR_NUMBER must be a positive integer.

        Raises:
            ConfigurationError: If any variable is missing or invalid
        """
        env = os.environ if environ is None else environ

        required = ("PR_OWNER", "PR_REPO", "PR_NUMBER", "GITHUB_TOKEN")
        missing = [name for name in required if not env.get(name, "").strip()]
        if missing:
            raise ConfigurationError(
                f"Missing environment variables: {', '.join(missing)}",
                variables=missing
            )

        raw_number = env["PR_NUMBER"].strip()
        try:
            pull_number = int(raw_number)
        except ValueError:
            pull_number = 0
        if pull_number <= 0:
            raise ConfigurationError(
                f"PR_NUMBER must be a positive integer, got {raw_number!r}",
                variables=["PR_NUMBER"]
            )

        return cls(
            owner=env["PR_OWNER"].strip(),
            repo=env["PR_REPO"].strip(),
            pull_number=pull_number,
            token=env["GITHUB_TOKEN"].strip(),
        )


@dataclass(frozen=True)
class ServerConfig:
    """Transport, logging and report settings for the MCP server."""

    transport: str = DEFAULT_TRANSPORT
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    log_file: Optional[str] = None
    rules_file: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """Build the server configuration from MCP_* and logging variables."""
        env = os.environ if environ is None else environ

        transport = env.get("MCP_TRANSPORT", DEFAULT_TRANSPORT)
        if transport not in SUPPORTED_TRANSPORTS:
            raise ConfigurationError(
                f"MCP_TRANSPORT must be one of {', '.join(SUPPORTED_TRANSPORTS)}, got {transport!r}",
                variables=["MCP_TRANSPORT"]
            )

        raw_port = env.get("MCP_PORT", str(DEFAULT_PORT))
        try:
            port = int(raw_port)
        except ValueError:
            raise ConfigurationError(
                f"MCP_PORT must be an integer, got {raw_port!r}",
                variables=["MCP_PORT"]
            )

        return cls(
            transport=transport,
            host=env.get("MCP_HOST", DEFAULT_HOST),
            port=port,
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_file=env.get("LOG_FILE") or None,
            rules_file=env.get("PR_RULES_FILE") or None,
        )
