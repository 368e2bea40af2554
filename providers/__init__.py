from providers.base import SummarySource
from providers.githubstatus import GitHubStatusProvider

__all__ = ["SummarySource", "GitHubStatusProvider"]
