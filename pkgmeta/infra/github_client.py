"""
GitHub API client infrastructure for pkgmeta.

Provides a clean abstraction over the GitHub calls the pull-request
step needs (who am I, fork a repository):
- Uses `gh` CLI when available for authentication
- Falls back to requests with token
- Handles rate limiting with exponential backoff
"""

import subprocess
import json
import os
import re
import time
import logging
from dataclasses import dataclass
from typing import Optional, Dict, Any, Tuple

import requests

logger = logging.getLogger(__name__)

GITHUB_REGEX = re.compile(
    r"^(?:git@|git://|https://(?:[\w\.\+\-]+@)?)github\.com[:/](([^/].+)/(.+?))(?:\.git)?$",
    re.IGNORECASE,
)


class GitHubAPIError(Exception):
    """A GitHub API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


def parse_github_url(url: str) -> Optional[Tuple[str, str]]:
    """
    Split a GitHub remote URL into (owner, repo).

    Accepts ssh (git@github.com:owner/repo.git), git:// and https forms.

    Returns:
        (owner, repo) or None if the URL is not a GitHub URL
    """
    m = GITHUB_REGEX.match(url.strip())
    if m is None:
        return None
    return m.group(2), m.group(3)


def normalize_url(url: str) -> str:
    """Canonical form of a GitHub URL; other URLs are returned unchanged."""
    parsed = parse_github_url(url)
    if parsed is None:
        return url
    owner, repo = parsed
    return f"https://github.com/{owner}/{repo}.git"


@dataclass
class GitHubUser:
    """Authenticated GitHub identity."""
    login: str
    html_url: str = ""

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubUser':
        """Create from GitHub API response."""
        return cls(login=data.get('login', ''), html_url=data.get('html_url', ''))


@dataclass
class GitHubFork:
    """A fork created (or already owned) by the authenticated user."""
    full_name: str
    ssh_url: str
    html_url: str

    @classmethod
    def from_api_response(cls, data: Dict[str, Any]) -> 'GitHubFork':
        """Create from GitHub API response."""
        return cls(
            full_name=data.get('full_name', ''),
            ssh_url=data.get('ssh_url', ''),
            html_url=data.get('html_url', ''),
        )


class GitHubClient:
    """
    GitHub API client with rate limiting.

    Uses `gh` CLI for authentication when available,
    with fallback to direct API calls with token.

    Example:
        client = GitHubClient()
        fork = client.fork("owner", "repo")
        print(fork.ssh_url)
    """

    def __init__(
        self,
        token: Optional[str] = None,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        use_gh_cli: Optional[bool] = None
    ):
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token (defaults to PKGMETA_GITHUB_TOKEN or GITHUB_TOKEN env var)
            max_retries: Maximum retry attempts for rate-limited requests
            base_delay: Base delay for exponential backoff
            max_delay: Maximum delay between retries
            use_gh_cli: Force (or forbid) the gh CLI; auto-detected when None
        """
        self.token = token or os.environ.get('PKGMETA_GITHUB_TOKEN') or os.environ.get('GITHUB_TOKEN')
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self._use_gh_cli = self._check_gh_cli() if use_gh_cli is None else use_gh_cli

    def _check_gh_cli(self) -> bool:
        """Check if gh CLI is available and authenticated."""
        try:
            result = subprocess.run(
                ['gh', 'auth', 'status'],
                capture_output=True,
                text=True,
                timeout=10
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def _gh_api(self, endpoint: str, method: str = "GET") -> Dict[str, Any]:
        """Call GitHub API using gh CLI."""
        try:
            result = subprocess.run(
                ['gh', 'api', '-X', method, endpoint],
                capture_output=True,
                text=True,
                timeout=60
            )
        except (subprocess.TimeoutExpired, FileNotFoundError) as e:
            raise GitHubAPIError(f"gh api {method} {endpoint} failed: {e}")

        if result.returncode != 0:
            raise GitHubAPIError(f"gh api {method} {endpoint} failed: {result.stderr.strip()}")
        try:
            return json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise GitHubAPIError(f"gh api {method} {endpoint} returned invalid JSON: {e}")

    def _requests_api(self, endpoint: str, method: str = "GET") -> Dict[str, Any]:
        """Call GitHub API using requests library."""
        url = f"https://api.github.com/{endpoint}"
        headers = {
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'pkgmeta'
        }

        if self.token:
            headers['Authorization'] = f'token {self.token}'
        elif method != "GET":
            raise GitHubAPIError(
                "GitHub authentication required: set GITHUB_TOKEN or log in with `gh auth login`",
                status_code=401,
            )

        last_error = "no response"
        for attempt in range(self.max_retries):
            try:
                response = requests.request(method, url, headers=headers, timeout=30)
            except requests.RequestException as e:
                logger.warning(f"GitHub API request failed: {e}")
                last_error = str(e)
                if attempt < self.max_retries - 1:
                    time.sleep(min(self.base_delay * (2 ** attempt), self.max_delay))
                continue

            if response.status_code in (200, 201, 202):
                return response.json()

            if response.status_code == 403 and response.headers.get('X-RateLimit-Remaining') == '0':
                reset_time = response.headers.get('X-RateLimit-Reset')
                wait_time = int(reset_time) - int(time.time()) if reset_time else -1
                if 0 < wait_time < self.max_delay:
                    logger.info(f"Rate limited, waiting {wait_time}s")
                    time.sleep(wait_time)
                else:
                    delay = min(self.base_delay * (2 ** attempt), self.max_delay)
                    logger.info(f"Rate limited, waiting {delay}s (attempt {attempt + 1})")
                    time.sleep(delay)
                last_error = "rate limited"
                continue

            try:
                detail = response.json().get('message', '')
            except ValueError:
                detail = response.text
            raise GitHubAPIError(
                f"GitHub API error {response.status_code} for {method} {endpoint}: {detail}",
                status_code=response.status_code,
            )

        raise GitHubAPIError(f"GitHub API {method} {endpoint} failed: {last_error}")

    def _api(self, endpoint: str, method: str = "GET") -> Dict[str, Any]:
        """Call GitHub API using best available method."""
        if self._use_gh_cli:
            try:
                return self._gh_api(endpoint, method)
            except GitHubAPIError as e:
                logger.debug(f"gh api call failed, falling back to requests: {e}")

        return self._requests_api(endpoint, method)

    def current_user(self) -> GitHubUser:
        """Get the authenticated user."""
        return GitHubUser.from_api_response(self._api("user"))

    def fork(self, owner: str, name: str) -> GitHubFork:
        """
        Fork a repository under the authenticated user.

        GitHub returns the existing fork when one already exists.

        Args:
            owner: Repository owner
            name: Repository name
        """
        return GitHubFork.from_api_response(self._api(f"repos/{owner}/{name}/forks", method="POST"))
