"""Markdown renderer for the deployment status comment.

Produces the row for the project being deployed and serializes the whole
status table:

  - Status cell with an icon and a link back to the CI run
  - Preview link with a page-speed badge
  - Updated timestamp in the configured timezone
"""

from __future__ import annotations

import re
from datetime import datetime, timezone as dt_timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pagesdeploy.exceptions import ConfigError
from pagesdeploy.github.comment_table import (
    HEADER_TITLE,
    DeploymentRow,
    parse_deployment_rows,
)

_HOST_RE = re.compile(r"^(?:https?://)?([^/]+)", re.IGNORECASE)
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _stage_badge(stage_status: str | None) -> tuple[str, str, str]:
    """Return (status icon, status text, preview emoji) for a deploy stage status."""
    if stage_status == "idle":
        return ("⚡️", "Deploying", "⚡️")
    elif stage_status == "failure":
        return ("🚫", "Failed", "💥")
    else:
        return ("✅", "Ready", "😎")


def stage_status(deployment: dict) -> str | None:
    """Status of the ``deploy`` stage of a Pages deployment, if present."""
    for stage in deployment.get("stages") or []:
        if stage.get("name") == "deploy":
            return stage.get("status")
    return None


def extract_host(url: str) -> str | None:
    match = _HOST_RE.match(url)
    return match.group(1) if match else None


def performance_badge(url: str) -> str:
    """Markdown image linking to page-speed.dev for the URL's host."""
    host = extract_host(url)
    if not host:
        return ""
    return (
        f"\n[![Performance](https://page-speed.dev/badge/{host})]"
        f"(https://page-speed.dev/{host})"
    )


def format_updated(now: datetime, timezone: str) -> str:
    """Format ``now`` like ``Oct 7, 2026, 3:05 PM`` in ``timezone``."""
    try:
        tz = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        raise ConfigError(f"Unknown timezone: '{timezone}'")
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt_timezone.utc)
    local = now.astimezone(tz)
    hour = local.hour % 12 or 12
    meridiem = "AM" if local.hour < 12 else "PM"
    return (
        f"{_MONTHS[local.month - 1]} {local.day}, {local.year}, "
        f"{hour}:{local.minute:02d} {meridiem}"
    )


def render_current_row(
    project_name: str,
    stage_status: str | None,
    alias_url: str,
    inspect_url: str,
    timezone: str = "UTC",
    now: datetime | None = None,
) -> DeploymentRow:
    """Build the freshly computed row for the project being deployed."""
    icon, text, emoji = _stage_badge(stage_status)
    url_cell = ""
    if alias_url:
        url_cell = f"{emoji} [Visit Preview]({alias_url}){performance_badge(alias_url)}"

    return DeploymentRow(
        name=project_name,
        status=f"{icon} {text} ([Inspect]({inspect_url}))",
        url=url_cell,
        updated=format_updated(now or datetime.now(dt_timezone.utc), timezone),
        inspect_url=inspect_url,
    )


def render_status_comment(
    rows: list[DeploymentRow],
    current_project: str,
    timezone: str,
    commit_hash: str,
) -> str:
    """Render the full status comment body."""
    lines = [
        f"## {HEADER_TITLE}",
        "",
        f"| Name | Status | Preview | Updated ({timezone}) | ",
        "| ---- | ------ | ------- | ------------- |",
    ]
    for row in rows:
        name_cell = f"**{row.name}**" if row.name == current_project else row.name
        lines.append(f"| {name_cell} | {row.status} | {row.url} | {row.updated} |")

    lines.append("")
    lines.append(f"**Latest commit:** `{commit_hash[:8]}`")
    return "\n".join(lines)


def reconcile_status_comment(
    previous_body: str | None,
    current_row: DeploymentRow,
    timezone: str,
    commit_hash: str,
) -> str:
    """Merge ``current_row`` into the table of a previous comment and re-render."""
    rows = parse_deployment_rows(previous_body, current_row.name)
    rows.append(current_row)
    return render_status_comment(rows, current_row.name, timezone, commit_hash)
