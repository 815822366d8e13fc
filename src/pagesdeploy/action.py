"""Deploy to Cloudflare Pages and report back to the pull request.

This is the main entry point for the GitHub Action. It:
1. Looks up the Pages project and works out the environment
2. Opens a GitHub deployment (when GitHub credentials are present)
3. Deploys the directory with wrangler and publishes the step outputs
4. Merges this project's row into the PR status comment
5. Reacts to the comment and records the deployment status

Every step needs the previous one's result, so they run strictly in order.
A failure aborts the rest; side effects already made are not rolled back.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import httpx

from pagesdeploy.cloudflare.client import PagesClient
from pagesdeploy.cloudflare.wrangler import run_pages_deploy
from pagesdeploy.config import ActionInputs
from pagesdeploy.context import ActionContext
from pagesdeploy.github.auth import resolve_github_token
from pagesdeploy.github.client import GitHubClient
from pagesdeploy.github.comment_table import parse_deployment_rows
from pagesdeploy.github.renderer import (
    render_current_row,
    render_status_comment,
    stage_status,
)

logger = logging.getLogger("pagesdeploy.action")


@dataclass
class DeployResult:
    """What a run produced."""
    deployment_id: str
    url: str
    environment: str
    alias: str
    environment_name: str
    production: bool
    comment: str
    comment_id: int | None = None
    github_deployment_id: int | None = None


def environment_name(project_name: str, production: bool) -> str:
    return f"{project_name} ({'Production' if production else 'Preview'})"


def is_production(project: dict, head_branch: str, branch: str) -> bool:
    production_branch = project.get("production_branch")
    return head_branch == production_branch or branch == production_branch


def resolve_alias(deployment: dict, production: bool) -> str:
    """Preview deployments are reached through their first alias, if any."""
    aliases = deployment.get("aliases") or []
    if not production and aliases:
        return aliases[0]
    return deployment.get("url", "")


def commit_hash(deployment: dict) -> str:
    trigger = deployment.get("deployment_trigger") or {}
    return (trigger.get("metadata") or {}).get("commit_hash") or ""


async def run_action(
    inputs: ActionInputs,
    context: ActionContext,
    cloudflare: PagesClient,
    github: GitHubClient | None = None,
    deploy: Callable[..., str] = run_pages_deploy,
    now: datetime | None = None,
) -> DeployResult:
    """Run the full deploy-and-report sequence.

    ``github`` is None when no GitHub credentials were given; the comment is
    then only written to the job summary.
    """
    project = await cloudflare.get_project(inputs.project_name)

    production = is_production(project, context.head_branch, inputs.branch)
    env_name = environment_name(inputs.project_name, production)

    github_deployment = None
    if github is not None:
        github_deployment = await github.create_deployment(
            ref=inputs.branch or context.sha,
            environment=env_name,
            production=production,
        )

    # wrangler blocks; keep it off the event loop
    await asyncio.to_thread(
        deploy,
        directory=inputs.directory,
        project_name=inputs.project_name,
        api_token=inputs.api_token,
        account_id=inputs.account_id,
        branch=inputs.branch,
        version=inputs.wrangler_version,
        working_directory=inputs.working_directory,
    )

    deployment = await cloudflare.latest_deployment(inputs.project_name)
    context.set_output("id", deployment.get("id", ""))
    context.set_output("url", deployment.get("url", ""))
    context.set_output("environment", deployment.get("environment", ""))

    alias = resolve_alias(deployment, production)
    context.set_output("alias", alias)

    previous_body = None
    if github is not None and context.issue_number:
        existing = await github.find_status_comment(context.issue_number)
        if existing:
            previous_body = existing.get("body")

    rows = parse_deployment_rows(previous_body, inputs.project_name)
    logger.debug(f"Carrying over {len(rows)} row(s) from the previous comment")

    rows.append(render_current_row(
        project_name=inputs.project_name,
        stage_status=stage_status(deployment),
        alias_url=alias,
        inspect_url=context.run_url(),
        timezone=inputs.timezone,
        now=now,
    ))
    comment = render_status_comment(
        rows, inputs.project_name, inputs.timezone, commit_hash(deployment),
    )
    context.write_summary(comment)

    comment_id = None
    if github is not None:
        posted = await github.upsert_status_comment(context.issue_number, comment)
        if posted:
            comment_id = posted.get("id")
            if inputs.reactions:
                await github.add_reactions(comment_id, inputs.reactions)

    if github is not None and github_deployment:
        await github.create_deployment_status(
            deployment_id=github_deployment["id"],
            environment=env_name,
            environment_url=deployment.get("url", ""),
            production=production,
            log_url=context.run_url(),
        )

    return DeployResult(
        deployment_id=deployment.get("id", ""),
        url=deployment.get("url", ""),
        environment=deployment.get("environment", ""),
        alias=alias,
        environment_name=env_name,
        production=production,
        comment=comment,
        comment_id=comment_id,
        github_deployment_id=github_deployment["id"] if github_deployment else None,
    )


async def deploy_from_inputs(
    inputs: ActionInputs,
    context: ActionContext,
    cwd: Path | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> DeployResult:
    """Build the API clients for ``inputs`` and run the action.

    ``transport`` is handed to every HTTP client, Cloudflare and GitHub alike.
    """
    token = await resolve_github_token(inputs, transport=transport)

    def deploy(**kwargs) -> str:
        return run_pages_deploy(cwd=cwd, **kwargs)

    async with PagesClient(
        inputs.api_token, inputs.account_id, transport=transport,
    ) as cloudflare:
        if token is None:
            logger.info("No GitHub credentials; skipping PR comment and deployment status")
            return await run_action(inputs, context, cloudflare, None, deploy=deploy)

        async with GitHubClient(
            token, context.owner, context.repo, transport=transport,
        ) as github:
            return await run_action(inputs, context, cloudflare, github, deploy=deploy)
