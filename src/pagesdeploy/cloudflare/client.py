"""Cloudflare Pages API client."""

from __future__ import annotations

import logging

import httpx

from pagesdeploy.exceptions import CloudflareAPIError, ProjectNotFoundError

logger = logging.getLogger("pagesdeploy.cloudflare")

CLOUDFLARE_API_URL = "https://api.cloudflare.com/client/v4"


class PagesClient:
    """Async client for the Pages endpoints of one Cloudflare account."""

    def __init__(
        self,
        api_token: str,
        account_id: str,
        api_url: str = CLOUDFLARE_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.account_id = account_id
        self._client = httpx.AsyncClient(
            base_url=api_url,
            headers={"Authorization": f"Bearer {api_token}"},
            timeout=30,
            transport=transport,
        )

    async def __aenter__(self) -> PagesClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _project_path(self, project_name: str) -> str:
        return f"/accounts/{self.account_id}/pages/projects/{project_name}"

    async def get_project(self, project_name: str) -> dict:
        """Look up a Pages project by name.

        Raises:
            CloudflareAPIError: If the API does not answer 200.
            ProjectNotFoundError: If the project does not exist.
        """
        response = await self._client.get(self._project_path(project_name))
        if response.status_code != 200:
            logger.error(f"Cloudflare API returned non-200: {response.status_code}")
            logger.error(f"API returned: {response.text}")
            raise CloudflareAPIError("Failed to get Pages project, API returned non-200")

        project = response.json().get("result")
        if project is None:
            raise ProjectNotFoundError(
                "Failed to get Pages project, project does not exist. "
                "Check the project name or create it!"
            )
        return project

    async def latest_deployment(self, project_name: str) -> dict:
        """Fetch the most recent deployment of a project."""
        response = await self._client.get(f"{self._project_path(project_name)}/deployments")
        if response.status_code != 200:
            logger.error(f"API returned: {response.text}")
            raise CloudflareAPIError(
                f"Failed to list Pages deployments, API returned {response.status_code}"
            )

        deployments = response.json().get("result") or []
        if not deployments:
            raise CloudflareAPIError(f"No deployments found for Pages project '{project_name}'")
        deployment = deployments[0]
        logger.debug(f"pagesDeployment: {deployment}")
        return deployment
