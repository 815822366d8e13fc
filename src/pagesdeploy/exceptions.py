"""Custom exceptions for pagesdeploy."""


class PagesDeployError(Exception):
    """Base exception for all pagesdeploy errors."""


class ConfigError(PagesDeployError):
    """Missing or invalid action inputs."""


class CloudflareAPIError(PagesDeployError):
    """The Cloudflare API returned an unexpected response."""


class ProjectNotFoundError(CloudflareAPIError):
    """The requested Pages project does not exist."""


class WranglerError(PagesDeployError):
    """The wrangler CLI failed to deploy."""

    def __init__(self, message: str, stderr: str = ""):
        super().__init__(message)
        self.stderr = stderr


class GitHubAPIError(PagesDeployError):
    """GitHub API request errors."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
