"""Command-line interface for pagesdeploy."""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

import click

from pagesdeploy import __version__
from pagesdeploy.config import build_inputs, read_input_env
from pagesdeploy.context import ActionContext
from pagesdeploy.exceptions import PagesDeployError
from pagesdeploy.ui.console import Console, configure_logging

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="pagesdeploy")
def main():
    """pagesdeploy - deploy to Cloudflare Pages and report on the pull request."""
    pass


# =========================================================================
# Deploy
# =========================================================================

@main.command()
@click.option("--api-token", default=None, help="Cloudflare API token.")
@click.option("--account-id", default=None, help="Cloudflare account id.")
@click.option("--project-name", default=None, help="Pages project name.")
@click.option("--directory", default=None, help="Directory of static assets to deploy.")
@click.option("--github-token", default=None, help="GitHub token for comments and deployments.")
@click.option("--branch", default=None, help="Branch to deploy to.")
@click.option("--working-directory", default=None, help="Directory to run wrangler in.")
@click.option("--wrangler-version", default=None, help="wrangler version to run (default: 3).")
@click.option("--timezone", default=None, help="Timezone for the Updated column (default: UTC).")
@click.option("--app-id", default=None, help="GitHub App id.")
@click.option("--private-key", default=None, help="GitHub App private key.")
@click.option("--installation-id", default=None, help="GitHub App installation id.")
@click.option("--reaction", "reactions", multiple=True, help="Reaction to add to the comment.")
@click.option("--debug/--no-debug", default=None, help="Dump intermediate API responses.")
def deploy(**options):
    """Deploy a directory to Cloudflare Pages.

    Every option falls back to the matching GitHub Actions input
    (INPUT_APITOKEN, INPUT_PROJECTNAME, ...), so inside a workflow step:

        pagesdeploy deploy

    Locally:

        pagesdeploy deploy --api-token ... --account-id ... --project-name site --directory dist
    """
    from pagesdeploy.action import deploy_from_inputs

    raw: dict = read_input_env(os.environ)
    reactions = options.pop("reactions")
    if reactions:
        raw["reactions"] = list(reactions)
    raw.update({k: v for k, v in options.items() if v is not None})

    try:
        inputs = build_inputs(raw)
        configure_logging(inputs.debug)
        console.banner()
        context = ActionContext.from_env()
        console.info(f"Deploying {inputs.directory} to Pages project '{inputs.project_name}'")
        result = asyncio.run(deploy_from_inputs(inputs, context))
    except Exception as e:
        console.error(str(e) or e.__class__.__name__)
        sys.exit(1)

    console.show_deployment(result)
    console.success(f"Deployed {inputs.project_name} to {result.alias or result.url}")


# =========================================================================
# Status comment preview
# =========================================================================

@main.command("render-comment")
@click.argument("project_name")
@click.option(
    "--previous", "previous_path", default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="File holding the previous status comment body.",
)
@click.option(
    "--stage-status",
    type=click.Choice(["idle", "success", "failure"]),
    default="success",
    help="Status of the deploy stage (default: success).",
)
@click.option("--alias-url", default="", help="Preview URL of the deployment.")
@click.option("--inspect-url", default="", help="URL of the CI run.")
@click.option("--commit", "commit_hash", default="", help="Commit hash of the deployment.")
@click.option("--timezone", default="UTC", help="Timezone for the Updated column.")
@click.option("--pretty", is_flag=True, help="Render the comment as terminal markdown.")
def render_comment(
    project_name: str,
    previous_path: Path | None,
    stage_status: str,
    alias_url: str,
    inspect_url: str,
    commit_hash: str,
    timezone: str,
    pretty: bool,
):
    """Render the status comment a deploy of PROJECT_NAME would post.

    Merges the project's row into the table of --previous, if given.

        pagesdeploy render-comment docs --previous comment.md --alias-url https://abc.docs.pages.dev
    """
    from pagesdeploy.github.renderer import reconcile_status_comment, render_current_row

    previous = previous_path.read_text(encoding="utf-8") if previous_path else None

    try:
        row = render_current_row(
            project_name=project_name,
            stage_status=stage_status,
            alias_url=alias_url,
            inspect_url=inspect_url,
            timezone=timezone,
        )
    except PagesDeployError as e:
        console.error(str(e))
        sys.exit(1)

    comment = reconcile_status_comment(previous, row, timezone, commit_hash)
    if pretty:
        console.markdown(comment)
    else:
        click.echo(comment)


if __name__ == "__main__":
    main()
