"""GitHub authentication: plain tokens or GitHub App installation tokens."""

from __future__ import annotations

import logging
import time

import httpx
import jwt

from pagesdeploy.config import ActionInputs
from pagesdeploy.exceptions import GitHubAPIError
from pagesdeploy.github.client import GITHUB_API_URL

logger = logging.getLogger("pagesdeploy.github")


def create_app_jwt(app_id: str, private_key: str, now: int | None = None) -> str:
    """Sign a short-lived JWT identifying the GitHub App.

    ``iat`` is backdated by a minute to tolerate clock drift; GitHub rejects
    tokens that live longer than ten minutes.
    """
    issued = int(time.time()) if now is None else now
    payload = {
        "iat": issued - 60,
        "exp": issued + 540,
        "iss": str(app_id),
    }
    # Multiline secrets are often stored with escaped newlines
    key = private_key.replace("\\n", "\n")
    return jwt.encode(payload, key, algorithm="RS256")


async def installation_token(
    app_id: str,
    private_key: str,
    installation_id: str,
    api_url: str = GITHUB_API_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str:
    """Exchange an App JWT for an installation access token."""
    app_jwt = create_app_jwt(app_id, private_key)
    async with httpx.AsyncClient(base_url=api_url, timeout=30, transport=transport) as client:
        response = await client.post(
            f"/app/installations/{installation_id}/access_tokens",
            headers={
                "Authorization": f"Bearer {app_jwt}",
                "Accept": "application/vnd.github+json",
            },
        )
    if response.status_code != 201:
        raise GitHubAPIError(
            f"Failed to create installation token ({response.status_code}): {response.text}",
            status_code=response.status_code,
        )
    return response.json()["token"]


async def resolve_github_token(
    inputs: ActionInputs,
    api_url: str = GITHUB_API_URL,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str | None:
    """Pick the token to talk to GitHub with.

    App credentials win over a plain token. Returns None when neither is set.
    """
    if inputs.has_app_credentials:
        logger.debug(f"Using GitHub App {inputs.app_id} installation {inputs.installation_id}")
        return await installation_token(
            inputs.app_id, inputs.private_key, inputs.installation_id,
            api_url=api_url, transport=transport,
        )
    return inputs.github_token or None
