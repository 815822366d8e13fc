"""GitHub REST client for the status comment, reactions and deployments."""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx

from pagesdeploy.exceptions import GitHubAPIError
from pagesdeploy.github.comment_table import find_status_comment

logger = logging.getLogger("pagesdeploy.github")

GITHUB_API_URL = os.environ.get("GITHUB_API_URL", "https://api.github.com")

REACTIONS = {"+1", "-1", "laugh", "confused", "heart", "hooray", "rocket", "eyes"}

# Informal names that GitHub has no reaction for
REACTION_ALIASES = {
    "tada": "hooray",
    "fire": "hooray",
    "sparkles": "hooray",
    "party_popper": "hooray",
    "party_blob": "hooray",
}


def resolve_reaction(name: str) -> str:
    """Map a reaction name to GitHub reaction content, defaulting to ``+1``."""
    lowered = name.strip().lower()
    if lowered in REACTIONS:
        return lowered
    return REACTION_ALIASES.get(lowered, "+1")


class GitHubClient:
    """Async client scoped to a single repository."""

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        api_url: str = GITHUB_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        require_bot_author: bool = False,
    ) -> None:
        self.owner = owner
        self.repo = repo
        self.require_bot_author = require_bot_author
        self._client = httpx.AsyncClient(
            base_url=api_url,
            headers={
                "Authorization": f"Bearer {token}",
                "Accept": "application/vnd.github+json",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=30,
            transport=transport,
        )

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def _repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        response = await self._client.request(method, path, **kwargs)
        if response.status_code >= 400:
            raise GitHubAPIError(
                f"GitHub API {method} {path} failed with {response.status_code}: "
                f"{response.text}",
                status_code=response.status_code,
            )
        return response

    # -- comments ---------------------------------------------------------

    async def list_comments(self, issue_number: int) -> list[dict]:
        response = await self._request(
            "GET", f"{self._repo_path}/issues/{issue_number}/comments",
            params={"per_page": 100},
        )
        comments = response.json()
        logger.debug(f"comments.data: {comments}")
        return comments

    async def find_status_comment(self, issue_number: int) -> dict | None:
        comments = await self.list_comments(issue_number)
        return find_status_comment(comments, require_bot_author=self.require_bot_author)

    async def create_comment(self, issue_number: int, body: str) -> dict:
        response = await self._request(
            "POST", f"{self._repo_path}/issues/{issue_number}/comments",
            json={"body": body},
        )
        return response.json()

    async def update_comment(self, comment_id: int, body: str) -> dict:
        response = await self._request(
            "PATCH", f"{self._repo_path}/issues/comments/{comment_id}",
            json={"body": body},
        )
        return response.json()

    async def upsert_status_comment(self, issue_number: int | None, body: str) -> dict | None:
        """Update the existing status comment, or create one.

        Returns None when there is no pull request to comment on.
        """
        if not issue_number:
            return None

        existing = await self.find_status_comment(issue_number)
        if existing:
            return await self.update_comment(existing["id"], body)
        return await self.create_comment(issue_number, body)

    async def add_reactions(self, comment_id: int, reactions: list[str]) -> list[str]:
        """React to a comment. Failures are logged per reaction, never raised.

        Returns the reaction contents that were added.
        """
        added: list[str] = []
        for reaction in reactions:
            content = resolve_reaction(reaction)
            try:
                await self._request(
                    "POST", f"{self._repo_path}/issues/comments/{comment_id}/reactions",
                    json={"content": content},
                )
            except (GitHubAPIError, httpx.HTTPError) as e:
                logger.warning(f"Failed to add reaction '{reaction}' to comment: {e}")
                continue
            logger.debug(f"Added reaction '{content}' to comment {comment_id}")
            added.append(content)
        return added

    # -- deployments ------------------------------------------------------

    async def create_deployment(
        self, ref: str, environment: str, production: bool
    ) -> dict | None:
        """Create a GitHub deployment. Returns None unless GitHub answers 201."""
        response = await self._request(
            "POST", f"{self._repo_path}/deployments",
            json={
                "ref": ref,
                "auto_merge": False,
                "description": "Cloudflare Pages",
                "required_contexts": [],
                "environment": environment,
                "production_environment": production,
            },
        )
        logger.debug(f"deployment.data: {response.json()}")
        if response.status_code == 201:
            return response.json()
        return None

    async def create_deployment_status(
        self,
        deployment_id: int,
        environment: str,
        environment_url: str,
        production: bool,
        log_url: str,
    ) -> dict:
        """Mark a deployment as done. The state is always ``success``."""
        response = await self._request(
            "POST", f"{self._repo_path}/deployments/{deployment_id}/statuses",
            json={
                "state": "success",
                "environment": environment,
                "environment_url": environment_url,
                "production_environment": production,
                "log_url": log_url,
                "description": "Cloudflare Pages",
                "auto_inactive": False,
            },
        )
        data = response.json()
        logger.debug(f"deploymentStatus.data: {data}")
        return data
