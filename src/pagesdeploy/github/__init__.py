"""Deployment status comment — keeps one running table per pull request.

Each Pages project deploying against a PR gets one row:
  - Status (deploying / ready / failed) with a link to the CI run
  - Preview link and page-speed badge
  - Last updated time
"""
