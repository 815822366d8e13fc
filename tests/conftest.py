"""Shared test fixtures for pagesdeploy."""

from __future__ import annotations

import json
import re
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from pagesdeploy.config import ActionInputs
from pagesdeploy.context import ActionContext

NOW = datetime(2026, 10, 7, 15, 5, tzinfo=timezone.utc)

RUN_URL = "https://github.com/acme/site/actions/runs/99?pr=7"

PREVIOUS_COMMENT = """\
## 🚀 Deploying your latest changes

| Name | Status | Preview | Updated (UTC) |
| ---- | ------ | ------- | ------------- |
| docs | ✅ Ready ([Inspect](https://github.com/acme/site/actions/runs/11)) | 😎 [Visit Preview](https://abc.docs.pages.dev)
[![Performance](https://page-speed.dev/badge/abc.docs.pages.dev)](https://page-speed.dev/abc.docs.pages.dev) | Oct 6, 2026, 9:12 AM |
| **site** | ⚡️ Deploying ([Inspect](https://github.com/acme/site/actions/runs/12)) | ⚡️ [Visit Preview](https://old.site.pages.dev)
[![Performance](https://page-speed.dev/badge/old.site.pages.dev)](https://page-speed.dev/old.site.pages.dev) | Oct 6, 2026, 9:15 AM |
| marketing | 🚫 Failed ([Inspect](https://github.com/acme/site/actions/runs/13)) |  | Oct 6, 2026, 10:01 AM |

**Latest commit:** `1234abcd`"""

PROJECT = {"name": "site", "production_branch": "main"}

DEPLOYMENT = {
    "id": "dep-123",
    "url": "https://dep123.site.pages.dev",
    "environment": "preview",
    "aliases": ["https://feature-x.site.pages.dev"],
    "stages": [
        {"name": "queued", "status": "success"},
        {"name": "deploy", "status": "success"},
    ],
    "deployment_trigger": {"metadata": {"commit_hash": "abcdef1234567890"}},
}


class FakeGitHubAPI:
    """In-memory stand-in for the GitHub REST endpoints we call."""

    def __init__(self, comments: list[dict] | None = None, fail_reactions=()) -> None:
        self.comments = list(comments or [])
        self.fail_reactions = set(fail_reactions)
        self.requests: list[httpx.Request] = []
        self.reactions: list[str] = []
        self.deployments: list[dict] = []
        self.statuses: list[dict] = []
        self._next_id = 1000

    def _new_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        method = request.method
        body = json.loads(request.content) if request.content else {}

        if method == "POST" and path.endswith("/reactions"):
            if body["content"] in self.fail_reactions:
                return httpx.Response(422, json={"message": "Validation Failed"})
            self.reactions.append(body["content"])
            return httpx.Response(201, json={"content": body["content"]})
        if method == "GET" and path.endswith("/comments"):
            return httpx.Response(200, json=self.comments)
        if method == "POST" and re.search(r"/issues/\d+/comments$", path):
            comment = {"id": self._new_id(), "body": body["body"], "user": {"type": "Bot"}}
            self.comments.append(comment)
            return httpx.Response(201, json=comment)
        if method == "PATCH" and "/issues/comments/" in path:
            comment_id = int(path.rsplit("/", 1)[1])
            for comment in self.comments:
                if comment["id"] == comment_id:
                    comment["body"] = body["body"]
                    return httpx.Response(200, json=comment)
            return httpx.Response(404, json={"message": "Not Found"})
        if method == "POST" and path.endswith("/statuses"):
            self.statuses.append(body)
            return httpx.Response(201, json={"id": self._new_id(), **body})
        if method == "POST" and path.endswith("/deployments"):
            deployment = {"id": self._new_id(), **body}
            self.deployments.append(deployment)
            return httpx.Response(201, json=deployment)
        return httpx.Response(404, json={"message": "Not Found"})


class FakeCloudflareAPI:
    """In-memory stand-in for the Pages project and deployments endpoints."""

    def __init__(
        self,
        project: dict | None = PROJECT,
        deployments: list[dict] | None = None,
        project_status: int = 200,
    ) -> None:
        self.project = project
        self.deployments = [DEPLOYMENT] if deployments is None else deployments
        self.project_status = project_status
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.endswith("/deployments"):
            return httpx.Response(200, json={"success": True, "result": self.deployments})
        if "/pages/projects/" in path:
            if self.project_status != 200:
                return httpx.Response(self.project_status, text="upstream error")
            return httpx.Response(200, json={"success": True, "result": self.project})
        return httpx.Response(404, json={"success": False})


@pytest.fixture
def inputs() -> ActionInputs:
    return ActionInputs(
        api_token="cf-token",
        account_id="acc-1",
        project_name="site",
        directory="dist",
        github_token="gh-token",
        branch="feature-x",
    )


@pytest.fixture
def action_context(tmp_path: Path) -> ActionContext:
    return ActionContext(
        owner="acme",
        repo="site",
        sha="f00dbabe" * 5,
        run_id="99",
        head_branch="feature-x",
        issue_number=7,
        is_pull_request=True,
        output_path=str(tmp_path / "output.txt"),
        summary_path=str(tmp_path / "summary.md"),
    )


@pytest.fixture
def event_file(tmp_path: Path) -> Path:
    """A pull_request event payload as GitHub writes it to GITHUB_EVENT_PATH."""
    path = tmp_path / "event.json"
    path.write_text(json.dumps({"action": "synchronize", "pull_request": {"number": 7}}))
    return path


@pytest.fixture(scope="session")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def pem(rsa_key) -> str:
    """PEM of ``rsa_key``, as a GitHub App private key input."""
    return rsa_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode()
