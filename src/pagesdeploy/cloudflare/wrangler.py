"""Run ``wrangler pages deploy`` for a local directory."""

from __future__ import annotations

import logging
import os
import subprocess
from pathlib import Path

from pagesdeploy.exceptions import WranglerError

logger = logging.getLogger("pagesdeploy.cloudflare")


def build_deploy_command(
    directory: str, project_name: str, branch: str = "", version: str = "3"
) -> list[str]:
    cmd = [
        "npx", f"wrangler@{version}", "pages", "deploy", directory,
        f"--project-name={project_name}",
    ]
    if branch:
        cmd.append(f"--branch={branch}")
    return cmd


def run_pages_deploy(
    directory: str,
    project_name: str,
    api_token: str,
    account_id: str = "",
    branch: str = "",
    version: str = "3",
    working_directory: str = "",
    cwd: Path | None = None,
) -> str:
    """Deploy ``directory`` with wrangler. Returns wrangler's stdout."""
    run_dir = (cwd or Path.cwd()) / working_directory
    env = dict(os.environ)
    env["CLOUDFLARE_API_TOKEN"] = api_token
    if account_id:
        env["CLOUDFLARE_ACCOUNT_ID"] = account_id

    cmd = build_deploy_command(directory, project_name, branch, version)
    logger.info(f"Running {' '.join(cmd)} in {run_dir}")

    try:
        result = subprocess.run(
            cmd,
            cwd=run_dir,
            env=env,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as e:
        raise WranglerError(f"Could not run wrangler: {e}") from e

    if result.stdout:
        logger.info(result.stdout.rstrip())
    if result.returncode != 0:
        raise WranglerError(
            f"wrangler pages deploy exited with status {result.returncode}",
            stderr=result.stderr,
        )
    return result.stdout
