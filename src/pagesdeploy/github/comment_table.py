"""Status comment table parser.

Extracts the per-project deployment rows from a previously posted status
comment so they can be carried over when another project deploys against the
same pull request. Parsing is best-effort: rows that don't fit the four-cell
shape are skipped, never fatal.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

HEADER_TITLE = "🚀 Deploying your latest changes"

# Four pipe-delimited cells; the preview cell may wrap onto a badge line.
_ROW_RE = re.compile(r"\|\s*([^|]*?)\s*\|\s*([^|]*?)\s*\|\s*([\s\S]*?)\s*\|\s*([^|]*?)\s*\|")
_INSPECT_RE = re.compile(r"\[Inspect\]\(([^)]+)\)")


@dataclass
class DeploymentRow:
    """One line of the status table."""
    name: str
    status: str
    url: str
    updated: str
    inspect_url: str = ""


def _strip_strong(name: str) -> str:
    """Drop the bold marker the renderer puts on the current project."""
    if len(name) > 4 and name.startswith("**") and name.endswith("**"):
        return name[2:-2].strip()
    return name


def extract_inspect_url(status: str) -> str:
    match = _INSPECT_RE.search(status)
    return match.group(1) if match else ""


def parse_deployment_rows(
    comment_body: str | None, current_project: str
) -> list[DeploymentRow]:
    """Parse the rows of every other project from a previous status comment.

    The first two matches (header and separator) are dropped. Rows for
    ``current_project`` are excluded since they get recomputed.
    """
    if not comment_body:
        return []

    matches = list(_ROW_RE.finditer(comment_body))
    if len(matches) <= 2:
        return []

    rows: list[DeploymentRow] = []
    for match in matches[2:]:
        cells = [c.strip() for c in match.groups() if c is not None]
        if len(cells) < 4:
            continue
        name, status, url, updated = cells[:4]
        name = _strip_strong(name)
        if not name or name == current_project:
            continue
        rows.append(DeploymentRow(
            name=name,
            status=status,
            url=url,
            updated=updated,
            inspect_url=extract_inspect_url(status),
        ))

    return rows


def is_status_comment(comment: dict, require_bot_author: bool = False) -> bool:
    """Whether ``comment`` is the bot-managed status comment.

    Matches on the sentinel header. With ``require_bot_author`` the comment
    must also have been written by an app (``user.type == "Bot"``).
    """
    body = comment.get("body") or ""
    if HEADER_TITLE not in body:
        return False
    if require_bot_author:
        return (comment.get("user") or {}).get("type") == "Bot"
    return True


def find_status_comment(
    comments: list[dict], require_bot_author: bool = False
) -> dict | None:
    for comment in comments:
        if is_status_comment(comment, require_bot_author=require_bot_author):
            return comment
    return None
