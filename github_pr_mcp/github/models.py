"""Data models for GitHub API responses."""

from typing import Any, Dict, Iterable, Optional, Sequence

UNKNOWN_AUTHOR = "Unknown"

# Where a pull request's author login may live, in order of preference
AUTHOR_LOGIN_PATHS = (("user", "login"), ("author", "login"))
COMMENT_AUTHOR_PATHS = (("user", "login"),)


def _lookup(data: Any, path: Sequence[str]) -> Optional[Any]:
    """Follow a key path through nested dicts; None if any step is missing."""
    value = data
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def resolve_field(
    data: Dict[str, Any],
    paths: Iterable[Sequence[str]],
    default: str = UNKNOWN_AUTHOR
) -> str:
    """
    Resolve the first non-empty string found along an ordered list of paths.

    Args:
        data: Upstream JSON object
        paths: Key paths to try in order, e.g. [("user", "login"), ("author", "login")]
        default: Value returned when no path yields a non-empty string

    Returns:
        The first non-empty value, or default
    """
    for path in paths:
        value = _lookup(data, path)
        if isinstance(value, str) and value != "":
            return value
    return default


class PullRequest:
    """Represents a GitHub pull request."""

    def __init__(self, data: Dict[str, Any]):
        self.number = data.get("number", 0)
        self.title = data.get("title", "")
        self.state = data.get("state", "")
        self.author = resolve_field(data, AUTHOR_LOGIN_PATHS)
        self.created_at = data.get("created_at", "")
        self.updated_at = data.get("updated_at", "")
        self.url = data.get("html_url", "")

    def summary(self) -> Dict[str, Any]:
        """Short form embedded in tool results."""
        return {
            "number": self.number,
            "title": self.title,
            "state": self.state,
        }


class Comment:
    """Represents a comment created on a pull request."""

    def __init__(self, data: Dict[str, Any]):
        self.id = data.get("id", 0)
        self.author = resolve_field(data, COMMENT_AUTHOR_PATHS)
        self.created_at = data.get("created_at", "")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "created_at": self.created_at,
            "author": self.author
        }
