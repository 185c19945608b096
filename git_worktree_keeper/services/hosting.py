"""Hosting service clients selected by the remote's host."""

import os
from typing import List, Optional, Protocol
from urllib.parse import urlparse

from github import Auth, Github, GithubException, UnknownObjectException

from git_worktree_keeper.constants import GENERIC_HOSTING, HOSTING_SERVICES
from git_worktree_keeper.exceptions import BackendFailure, NotFoundError
from git_worktree_keeper.logging_config import get_logger
from git_worktree_keeper.models.repository import PullRequest, Remote
from git_worktree_keeper.services.git.parsing import match_remote_url

logger = get_logger(__name__)


class HostingClient(Protocol):
    """Operations every hosting client offers."""

    hosting_service: str

    def authenticate(self) -> None: ...

    def validate_repository(self, owner: str, repo: str) -> None: ...

    def get_pull_requests(self, owner: str, repo: str, state: str = "open") -> List[PullRequest]: ...


def detect_hosting_service(url: str) -> str:
    """Hosting tag (``github``, ``gitlab``, ``bitbucket`` or ``generic``) for a remote URL."""
    parsed = match_remote_url(url)
    if parsed is not None:
        host = parsed[1]
    else:
        host = urlparse(url).hostname or ""
    return HOSTING_SERVICES.get(host.lower(), GENERIC_HOSTING)


class GitHubClient:
    """GitHub access through PyGithub."""

    hosting_service = "github"

    def __init__(self, token: Optional[str] = None, github: Optional[Github] = None):
        """Initialize the client.

        Args:
            token: Personal access token; anonymous access when omitted
            github: Preconfigured PyGithub instance, mainly for tests
        """
        if github is not None:
            self.github = github
        elif token:
            self.github = Github(auth=Auth.Token(token))
        else:
            logger.debug("[GitHub] No token configured, using anonymous access")
            self.github = Github()

    def authenticate(self) -> None:
        """Check the credentials by fetching the authenticated user."""
        try:
            login = self.github.get_user().login
        except GithubException as e:
            raise BackendFailure("authenticate with GitHub", str(e)) from e
        logger.debug(f"[GitHub] Authenticated as {login}")

    def validate_repository(self, owner: str, repo: str) -> None:
        """Check that ``owner/repo`` exists and is accessible."""
        self._get_repo(owner, repo)

    def get_pull_requests(self, owner: str, repo: str, state: str = "open") -> List[PullRequest]:
        """Pull requests of ``owner/repo`` in the given state."""
        gh_repo = self._get_repo(owner, repo)
        try:
            return [
                PullRequest(
                    number=pr.number,
                    title=pr.title,
                    head=pr.head.ref,
                    base=pr.base.ref,
                    state=pr.state,
                    url=pr.html_url,
                    merged=bool(pr.merged),
                )
                for pr in gh_repo.get_pulls(state=state)
            ]
        except GithubException as e:
            raise BackendFailure(f"list pull requests of {owner}/{repo}", str(e)) from e

    def _get_repo(self, owner: str, repo: str):
        full_name = f"{owner}/{repo}"
        try:
            return self.github.get_repo(full_name)
        except UnknownObjectException as e:
            raise NotFoundError(f"GitHub repository not found: {full_name}") from e
        except GithubException as e:
            raise BackendFailure(f"access GitHub repository {full_name}", str(e)) from e

    def close(self) -> None:
        self.github.close()


class GenericClient:
    """Placeholder for hosts without API support; every call fails."""

    def __init__(self, hosting_service: str = GENERIC_HOSTING):
        self.hosting_service = hosting_service

    def _unsupported(self, operation: str) -> BackendFailure:
        return BackendFailure(operation, f"not supported for hosting service '{self.hosting_service}'")

    def authenticate(self) -> None:
        raise self._unsupported("authenticate")

    def validate_repository(self, owner: str, repo: str) -> None:
        raise self._unsupported("validate repository")

    def get_pull_requests(self, owner: str, repo: str, state: str = "open") -> List[PullRequest]:
        raise self._unsupported("list pull requests")


def get_hosting_client(remote: Remote, token: Optional[str] = None) -> HostingClient:
    """Pick the client implementation for a remote's host.

    The GitHub token falls back to the ``GITHUB_TOKEN`` environment variable.
    """
    service = detect_hosting_service(remote.url)
    if service == "github":
        return GitHubClient(token or os.environ.get("GITHUB_TOKEN"))
    logger.debug(f"No API client for {service} remote {remote.url}")
    return GenericClient(service)
