"""Cloudflare Pages: API lookups and wrangler deploys."""

from pagesdeploy.cloudflare.client import PagesClient
from pagesdeploy.cloudflare.wrangler import build_deploy_command, run_pages_deploy

__all__ = ["PagesClient", "build_deploy_command", "run_pages_deploy"]
