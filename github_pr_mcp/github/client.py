"""GitHub API client for making HTTP requests."""

import logging
from typing import Any, Dict, List, Optional
import httpx

from ..config import GITHUB_API_BASE, DEFAULT_TIMEOUT, ErrorCode, get_github_headers
from ..utils.errors import MCPError, GitHubApiError
from ..utils.redact import safe_error_message


logger = logging.getLogger(__name__)


class GitHubClient:
    """Client for the GitHub pull request and issue comment endpoints.

    Every call is single-shot: no retries, no backoff. Non-2xx responses
    raise GitHubApiError; callers decide how to surface it.
    """

    def __init__(self, base_url: str = GITHUB_API_BASE, timeout: float = DEFAULT_TIMEOUT):
        """
        Initialize the GitHub API client.

        Args:
            base_url: GitHub REST API root
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        logger.debug(f"GitHubClient initialized for {self.base_url} with {timeout}s timeout")

    def _extract_rate_limit_info(self, response: httpx.Response) -> Dict[str, Any]:
        """Extract rate limit information from response headers."""
        return {
            "limit": response.headers.get("X-RateLimit-Limit"),
            "remaining": response.headers.get("X-RateLimit-Remaining"),
            "reset": response.headers.get("X-RateLimit-Reset")
        }

    def _check_rate_limit(self, response: httpx.Response) -> None:
        """Check and log rate limit status from response headers."""
        rate_info = self._extract_rate_limit_info(response)
        remaining = rate_info.get("remaining")
        limit = rate_info.get("limit")

        if remaining and limit:
            logger.debug(f"GitHub API rate limit: {remaining}/{limit} remaining")

            # Warn if approaching limit
            if int(remaining) < int(limit) * 0.1:
                logger.warning(f"Approaching GitHub API rate limit: {remaining}/{limit}")

    def _raise_for_status(self, response: httpx.Response, prefix: str = "GitHub API error") -> None:
        """Raise GitHubApiError for any non-2xx response."""
        status = response.status_code
        if 200 <= status < 300:
            return
        status_text = response.reason_phrase or ""
        logger.error(f"{prefix}: {status} {status_text}")
        raise GitHubApiError(status, status_text, f"{prefix}: {status} {status_text}".rstrip())

    async def list_pull_requests(
        self,
        owner: str,
        repo: str,
        token: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        List open pull requests of a repository.

        Args:
            owner: Repository owner
            repo: Repository name
            token: Optional GitHub token

        Returns:
            List of pull request objects as returned by GitHub

        Raises:
            GitHubApiError: If GitHub answers with a non-2xx status
            MCPError: If the request cannot be sent
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/pulls"
        logger.info(f"Listing pull requests for {owner}/{repo}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=get_github_headers(token))
                self._check_rate_limit(response)
                self._raise_for_status(response)
                pulls = response.json()

            logger.info(f"Found {len(pulls)} pull requests in {owner}/{repo}")
            return pulls

        except httpx.RequestError as e:
            logger.error(f"Network error: {safe_error_message(e, 'Network error')}")
            raise MCPError(
                ErrorCode.HTTP_ERROR,
                safe_error_message(e, "Network error while listing pull requests"),
                {}
            )

    async def get_pull_request(
        self,
        owner: str,
        repo: str,
        number: int,
        token: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Get a single pull request by number.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request number
            token: Optional GitHub token

        Returns:
            Pull request object as returned by GitHub

        Raises:
            GitHubApiError: If GitHub answers with a non-2xx status
            MCPError: If the request cannot be sent
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/pulls/{number}"
        logger.debug(f"Fetching pull request {owner}/{repo}#{number}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(url, headers=get_github_headers(token))
                self._check_rate_limit(response)
                self._raise_for_status(response)
                return response.json()

        except httpx.RequestError as e:
            raise MCPError(
                ErrorCode.HTTP_ERROR,
                safe_error_message(e, "Network error while fetching pull request"),
                {}
            )

    async def post_comment(
        self,
        owner: str,
        repo: str,
        number: int,
        body: str,
        token: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Post a comment on a pull request.

        Pull request comments go through the issues endpoint, since every
        pull request is also an issue.

        Args:
            owner: Repository owner
            repo: Repository name
            number: Pull request number
            body: Comment text (markdown)
            token: Optional GitHub token

        Returns:
            Created comment object as returned by GitHub

        Raises:
            GitHubApiError: If GitHub answers with a non-2xx status
            MCPError: If the request cannot be sent
        """
        url = f"{self.base_url}/repos/{owner}/{repo}/issues/{number}/comments"
        logger.info(f"Posting comment on {owner}/{repo}#{number} ({len(body)} chars)")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(
                    url,
                    json={"body": body},
                    headers=get_github_headers(token, json_body=True)
                )
                self._check_rate_limit(response)
                self._raise_for_status(response, prefix="Failed to post comment")
                return response.json()

        except httpx.RequestError as e:
            raise MCPError(
                ErrorCode.HTTP_ERROR,
                safe_error_message(e, "Network error while posting comment"),
                {}
            )
