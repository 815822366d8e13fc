"""GitHub Actions run context: repository, PR number, outputs and job summary."""

from __future__ import annotations

import json
import logging
import os
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("pagesdeploy.context")


@dataclass
class ActionContext:
    """What the workflow run tells us about itself."""
    owner: str = ""
    repo: str = ""
    sha: str = ""
    server_url: str = "https://github.com"
    run_id: str = ""
    head_branch: str = ""
    issue_number: int | None = None
    is_pull_request: bool = False
    output_path: str = ""
    summary_path: str = ""

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> ActionContext:
        env = os.environ if environ is None else environ
        owner, _, repo = env.get("GITHUB_REPOSITORY", "").partition("/")

        issue_number = None
        is_pull_request = False
        event_path = env.get("GITHUB_EVENT_PATH")
        if event_path and Path(event_path).exists():
            with open(event_path, encoding="utf-8") as f:
                event = json.load(f)
            pr = event.get("pull_request") or {}
            issue = event.get("issue") or {}
            is_pull_request = bool(pr)
            issue_number = pr.get("number") or issue.get("number")

        return cls(
            owner=owner,
            repo=repo,
            sha=env.get("GITHUB_SHA", ""),
            server_url=env.get("GITHUB_SERVER_URL") or "https://github.com",
            run_id=env.get("GITHUB_RUN_ID", ""),
            head_branch=env.get("GITHUB_HEAD_REF") or env.get("GITHUB_REF_NAME", ""),
            issue_number=issue_number,
            is_pull_request=is_pull_request,
            output_path=env.get("GITHUB_OUTPUT", ""),
            summary_path=env.get("GITHUB_STEP_SUMMARY", ""),
        )

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}" if self.owner and self.repo else ""

    def run_url(self) -> str:
        """Link to this workflow run, used as the inspect and log URL."""
        if not self.repository or not self.run_id:
            return self.server_url
        url = f"{self.server_url}/{self.repository}/actions/runs/{self.run_id}"
        if self.is_pull_request and self.issue_number:
            url += f"?pr={self.issue_number}"
        return url

    def set_output(self, name: str, value: object) -> None:
        """Publish a step output via the ``GITHUB_OUTPUT`` file."""
        text = "" if value is None else str(value)
        if not self.output_path:
            logger.info(f"output {name}={text}")
            return
        with open(self.output_path, "a", encoding="utf-8") as f:
            if "\n" in text:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                f.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")
            else:
                f.write(f"{name}={text}\n")

    def write_summary(self, markdown: str) -> None:
        """Append markdown to the job summary, if the runner provides one."""
        if not self.summary_path:
            return
        with open(self.summary_path, "a", encoding="utf-8") as f:
            f.write(markdown)
            if not markdown.endswith("\n"):
                f.write("\n")
