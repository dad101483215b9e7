"""GitHub API client wrapper.

This wraps PyGithub and a REST session to keep GitHub calls out of the poller and make
tests easy. Only the issue comment operations the progress report needs are exposed.
"""

from __future__ import annotations

import logging
from typing import Any

import requests
from github import Auth, Github, GithubException
from github.Repository import Repository

from codepipeline_execute.config import USER_AGENT
from codepipeline_execute.errors import TransportError

logger = logging.getLogger(__name__)


class GitHubClient:
    """Small wrapper around PyGithub for pull request comments."""

    def __init__(
        self,
        *,
        token: str,
        repository: str,
        base_url: str = "https://api.github.com",
        repo: Repository | None = None,
        github_api: Github | None = None,
        session: requests.Session | None = None,
    ) -> None:
        if not token:
            raise ValueError("GitHub token is required")
        if not repository:
            raise ValueError("GitHub repository is required")

        self._repository_name = repository
        self._rest_base_url = base_url.rstrip("/")
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
                "User-Agent": USER_AGENT,
            }
        )

        if repo is not None:
            self._repo = repo
            self._github = None
            logger.debug("Using injected Repository instance")
            return

        auth = Auth.Token(token)
        self._github = github_api or Github(auth=auth, base_url=base_url, user_agent=USER_AGENT)

        try:
            self._repo = self._github.get_repo(repository)
        except GithubException as e:
            raise TransportError(f"Failed to connect to repository {repository}: {e}") from e
        logger.info(
            "Authenticated with GitHub and connected to repository", extra={"repo": repository}
        )

    @property
    def repository(self) -> str:
        """Return the configured repository name ("owner/repo")."""

        return self._repository_name

    def _comment_url(self, *, comment_id: int) -> str:
        if comment_id <= 0:
            raise ValueError("comment_id must be a positive integer")
        return f"{self._rest_base_url}/repos/{self._repository_name}/issues/comments/{comment_id}"

    def create_issue_comment(self, *, issue_number: int, body: str) -> int:
        """Comment on an issue or pull request and return the comment id."""

        if issue_number <= 0:
            raise ValueError("issue_number must be a positive integer")

        try:
            issue = self._repo.get_issue(issue_number)
            comment = issue.create_comment(body)
        except GithubException as e:
            raise TransportError(f"Failed to comment on #{issue_number}: {e}") from e

        logger.debug(
            "Issue comment created",
            extra={"repo": self._repository_name, "issue_number": issue_number},
        )
        return int(comment.id)

    def update_issue_comment(self, *, comment_id: int, body: str) -> None:
        """Replace the body of an existing comment via REST."""

        url = self._comment_url(comment_id=comment_id)
        try:
            resp = self._session.patch(url, json={"body": body}, timeout=30)
            resp.raise_for_status()
            data: dict[str, Any] = resp.json()
        except requests.RequestException as e:
            raise TransportError(f"Failed to update comment {comment_id}: {e}") from e

        if data.get("id") != comment_id:
            logger.warning(
                "Comment update returned an unexpected id",
                extra={"comment_id": comment_id, "returned_id": data.get("id")},
            )

    def close(self) -> None:
        self._session.close()
        if self._github is not None:
            self._github.close()
