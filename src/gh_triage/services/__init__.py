"""Internal service layer: GitHub API client and execution context."""

from gh_triage.services.github_api import GitHubClient, GitHubError
from gh_triage.services.interfaces import (
    AppContext,
    GitHubApi,
    StaticTerminal,
    Terminal,
    build_app_context,
)

__all__ = [
    "AppContext",
    "GitHubApi",
    "GitHubClient",
    "GitHubError",
    "StaticTerminal",
    "Terminal",
    "build_app_context",
]
