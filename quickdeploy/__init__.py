"""
quickdeploy - One-command deployment of web framework projects to Cloudflare Workers.

This package detects which front-end framework a project uses, builds it with
the framework's own tooling and deploys the output with wrangler.
"""

__version__ = "0.1.0"
