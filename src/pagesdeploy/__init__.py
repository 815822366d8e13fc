"""pagesdeploy - deploy static sites to Cloudflare Pages from CI."""

__version__ = "0.1.0"
